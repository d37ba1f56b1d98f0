"""Result parsers.

A query hands its raw response to a result parser and returns the parser;
the parser decides what shape the caller sees.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from elasticsearcher.errors import ExecutionError
from elasticsearcher.search.client import to_plain


@dataclass
class SearchHit:
    """A search result hit."""
    id: str
    index: str
    score: Optional[float]
    source: Dict[str, Any]
    type: Optional[str] = None
    highlight: Optional[Dict[str, List[str]]] = None


@dataclass
class SearchResult:
    """Search result container."""
    hits: List[SearchHit]
    total: int
    max_score: Optional[float] = None
    took_ms: int = 0


class ResultParser(ABC):
    """Base class for result parsers."""

    def __init__(self) -> None:
        self._raw_results: Optional[Dict[str, Any]] = None

    def set_raw_results(self, raw_results: Any) -> None:
        self._raw_results = to_plain(raw_results)

    def get_raw_results(self) -> Dict[str, Any]:
        if self._raw_results is None:
            raise ExecutionError("No results yet, run the query first")
        return self._raw_results

    @property
    def has_results(self) -> bool:
        return self._raw_results is not None

    @abstractmethod
    def results(self) -> Any:
        """The parsed view of the raw response."""
        pass


class ArrayResultParser(ResultParser):
    """Returns the response as plain nested dicts and lists."""

    def results(self) -> Dict[str, Any]:
        return self.get_raw_results()


class HitsResultParser(ResultParser):
    """Returns the matched documents."""

    def results(self) -> SearchResult:
        raw = self.get_raw_results()
        hits_section = raw.get("hits", {})

        hits = [
            SearchHit(
                id=hit["_id"],
                index=hit["_index"],
                score=hit.get("_score"),
                source=hit.get("_source", {}),
                type=hit.get("_type"),
                highlight=hit.get("highlight"),
            )
            for hit in hits_section.get("hits", [])
        ]

        # Older clusters report a bare number
        total = hits_section.get("total", 0)
        if isinstance(total, dict):
            total = total["value"]

        return SearchResult(
            hits=hits,
            total=total,
            max_score=hits_section.get("max_score"),
            took_ms=raw.get("took", 0),
        )

    def total(self) -> int:
        return self.results().total

    def sources(self) -> List[Dict[str, Any]]:
        return [hit.source for hit in self.results().hits]


class AggregationsResultParser(ResultParser):
    """Returns the aggregations of the response."""

    def results(self) -> Dict[str, Any]:
        return self.get_raw_results().get("aggregations", {})

    def buckets(self, name: str) -> List[Dict[str, Any]]:
        return self.results().get(name, {}).get("buckets", [])
