"""Query DSL fragments.

Dataclass fragments for the common Elasticsearch queries. Clauses of a
``Bool`` may be other fragments, ``FragmentRef`` markers or plain dicts;
they are expanded when the body is parsed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from elasticsearcher.search.fragments import Fragment

Clause = Union[Fragment, Dict[str, Any], Any]


@dataclass
class MatchAll(Fragment):
    """Match all documents."""

    boost: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        if self.boost != 1.0:
            return {"match_all": {"boost": self.boost}}
        return {"match_all": {}}


@dataclass
class Match(Fragment):
    """Full-text match query."""

    field: str
    query: str
    operator: str = "or"  # or, and
    fuzziness: Optional[str] = None  # AUTO, 0, 1, 2
    minimum_should_match: Optional[str] = None
    boost: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        query_body: Dict[str, Any] = {"query": self.query}

        if self.operator != "or":
            query_body["operator"] = self.operator

        if self.fuzziness:
            query_body["fuzziness"] = self.fuzziness

        if self.minimum_should_match:
            query_body["minimum_should_match"] = self.minimum_should_match

        if self.boost != 1.0:
            query_body["boost"] = self.boost

        return {"match": {self.field: query_body}}


@dataclass
class MultiMatch(Fragment):
    """Multi-field match query."""

    query: str
    fields: List[str]
    type: str = "best_fields"  # best_fields, most_fields, cross_fields, phrase, phrase_prefix
    operator: str = "or"

    def to_dict(self) -> Dict[str, Any]:
        query_body: Dict[str, Any] = {
            "query": self.query,
            "fields": list(self.fields),
            "type": self.type,
        }

        if self.operator != "or":
            query_body["operator"] = self.operator

        return {"multi_match": query_body}


@dataclass
class Term(Fragment):
    """Exact term match query."""

    field: str
    value: Any
    boost: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        if self.boost != 1.0:
            return {"term": {self.field: {"value": self.value, "boost": self.boost}}}
        return {"term": {self.field: self.value}}


@dataclass
class Terms(Fragment):
    """Multiple exact term match query."""

    field: str
    values: List[Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"terms": {self.field: list(self.values)}}


@dataclass
class Range(Fragment):
    """Range query."""

    field: str
    gte: Optional[Any] = None
    gt: Optional[Any] = None
    lte: Optional[Any] = None
    lt: Optional[Any] = None
    format: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        range_body: Dict[str, Any] = {}

        if self.gte is not None:
            range_body["gte"] = self.gte
        if self.gt is not None:
            range_body["gt"] = self.gt
        if self.lte is not None:
            range_body["lte"] = self.lte
        if self.lt is not None:
            range_body["lt"] = self.lt
        if self.format:
            range_body["format"] = self.format

        return {"range": {self.field: range_body}}


@dataclass
class Exists(Fragment):
    """Field exists query."""

    field: str

    def to_dict(self) -> Dict[str, Any]:
        return {"exists": {"field": self.field}}


@dataclass
class Prefix(Fragment):
    """Prefix query."""

    field: str
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return {"prefix": {self.field: self.value}}


@dataclass
class Wildcard(Fragment):
    """Wildcard pattern query."""

    field: str
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return {"wildcard": {self.field: self.value}}


@dataclass
class Bool(Fragment):
    """Boolean compound query."""

    must: List[Clause] = field(default_factory=list)
    must_not: List[Clause] = field(default_factory=list)
    should: List[Clause] = field(default_factory=list)
    filter: List[Clause] = field(default_factory=list)
    minimum_should_match: Optional[Union[int, str]] = None

    def add_must(self, clause: Clause) -> "Bool":
        self.must.append(clause)
        return self

    def add_must_not(self, clause: Clause) -> "Bool":
        self.must_not.append(clause)
        return self

    def add_should(self, clause: Clause) -> "Bool":
        self.should.append(clause)
        return self

    def add_filter(self, clause: Clause) -> "Bool":
        self.filter.append(clause)
        return self

    def to_dict(self) -> Dict[str, Any]:
        bool_body: Dict[str, Any] = {}

        for key in ("must", "must_not", "should", "filter"):
            clauses = getattr(self, key)
            if clauses:
                bool_body[key] = list(clauses)

        if self.minimum_should_match is not None:
            bool_body["minimum_should_match"] = self.minimum_should_match

        return {"bool": bool_body}


@dataclass
class Paginated(Fragment):
    """Adds ``from`` and ``size`` to the body holding it. Pages start at 1."""

    page: int = 1
    per_page: int = 10

    is_parent = True

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.per_page < 0:
            raise ValueError("per_page must be >= 0")

    def to_dict(self) -> Dict[str, Any]:
        return {"from": (self.page - 1) * self.per_page, "size": self.per_page}


@dataclass
class Sorted(Fragment):
    """Adds a ``sort`` clause to the body holding it."""

    fields: Sequence[Tuple[str, str]] = ()

    is_parent = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sort": [{name: {"order": order}} for name, order in self.fields]
        }
