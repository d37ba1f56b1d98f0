"""Search Client Implementation.

Provides the Elasticsearch client wrapper the queries run against, and an
in-memory client for testing.
"""

from __future__ import annotations

import fnmatch
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from elasticsearch import Elasticsearch

from elasticsearcher.config import SearcherSettings, get_settings
from elasticsearcher.errors import ExecutionError

logger = logging.getLogger(__name__)

ALL_INDICES = "_all"

_JSON_HEADERS = {
    "accept": "application/json",
    "content-type": "application/json",
}


def to_plain(response: Any) -> Any:
    """Turn a client response object into plain dicts and lists."""
    response = getattr(response, "body", response)

    if isinstance(response, dict):
        return {key: to_plain(value) for key, value in response.items()}

    if isinstance(response, (list, tuple)):
        return [to_plain(item) for item in response]

    return response


class SearchClient(ABC):
    """Abstract base class for search clients."""

    @abstractmethod
    def search(
        self,
        index: str,
        body: Dict[str, Any],
        type: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Search for documents.

        Args:
            index: Comma-joined index names, or ``_all``
            body: Request body (query, sort, aggs, from, size, ...)
            type: Comma-joined type names; searches every type when omitted

        Returns:
            Raw search response
        """
        pass

    @abstractmethod
    def cluster_health(self) -> Dict[str, Any]:
        """Get cluster health.

        Returns:
            Health info holding at least ``status`` and ``number_of_nodes``
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the client connection."""
        pass


class ElasticsearchClient(SearchClient):
    """Elasticsearch client implementation.

    Transport and API errors raised by the ``elasticsearch`` package reach
    the caller untouched.
    """

    def __init__(
        self,
        settings: Optional[SearcherSettings] = None,
        client: Optional[Elasticsearch] = None,
    ):
        self.settings = settings or get_settings()
        self._client = client

    def _get_client(self) -> Elasticsearch:
        """Get or create Elasticsearch client."""
        if self._client is None:
            self._client = Elasticsearch(**self.settings.client_kwargs())
            logger.info(
                "Connected to Elasticsearch at %s",
                self.settings.cloud_id or self.settings.hosts,
            )

        return self._client

    def search(
        self,
        index: str,
        body: Dict[str, Any],
        type: Optional[str] = None,
    ) -> Dict[str, Any]:
        client = self._get_client()

        if type:
            # Typed endpoint of clusters that still carry mapping types
            path = f"/{quote(index, safe=',*')}/{quote(type, safe=',*')}/_search"
            response = client.perform_request(
                "POST", path, headers=_JSON_HEADERS, body=body
            )
        else:
            response = client.search(index=index, body=body)

        return to_plain(response)

    def cluster_health(self) -> Dict[str, Any]:
        client = self._get_client()
        return to_plain(client.cluster.health())

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


@dataclass
class _StoredDocument:
    id: str
    type: Optional[str]
    source: Dict[str, Any]


class InMemorySearchClient(SearchClient):
    """In-memory search client for testing.

    Understands a practical subset of the query DSL and answers with
    Elasticsearch-shaped responses.
    """

    def __init__(self, status: str = "green", number_of_nodes: int = 1):
        self.status = status
        self.number_of_nodes = number_of_nodes
        self.requests: List[Dict[str, Any]] = []
        self._indices: Dict[str, Dict[str, _StoredDocument]] = {}

    def create_index(self, index: str) -> None:
        self._indices.setdefault(index, {})

    def index(
        self,
        index: str,
        doc_id: str,
        document: Dict[str, Any],
        type: Optional[str] = None,
    ) -> None:
        self.create_index(index)
        self._indices[index][doc_id] = _StoredDocument(doc_id, type, document)

    def search(
        self,
        index: str,
        body: Dict[str, Any],
        type: Optional[str] = None,
    ) -> Dict[str, Any]:
        request: Dict[str, Any] = {"index": index, "body": body}
        if type is not None:
            request["type"] = type
        self.requests.append(request)

        if index == ALL_INDICES:
            names = list(self._indices)
        else:
            names = [name.strip() for name in index.split(",")]

        for name in names:
            if name not in self._indices:
                raise ExecutionError(
                    f"index_not_found_exception: no such index [{name}]",
                    index=name,
                )

        types = set(type.split(",")) if type else None
        query = body.get("query", {"match_all": {}})

        matched = []
        for name in names:
            for doc in self._indices[name].values():
                if types is not None and doc.type not in types:
                    continue
                if self._matches_query(doc.source, query):
                    matched.append((name, doc))

        for field_name, order in reversed(_sort_spec(body.get("sort"))):
            descending = order == "desc"
            matched.sort(
                key=lambda item: _sort_key(
                    _field_value(item[1].source, field_name), descending
                ),
                reverse=descending,
            )

        from_ = body.get("from", 0)
        size = body.get("size", 10)

        hits = []
        for name, doc in matched[from_:from_ + size]:
            hit: Dict[str, Any] = {
                "_index": name,
                "_id": doc.id,
                "_score": 1.0,
                "_source": doc.source,
            }
            if doc.type is not None:
                hit["_type"] = doc.type
            hits.append(hit)

        response: Dict[str, Any] = {
            "took": 0,
            "timed_out": False,
            "hits": {
                "total": {"value": len(matched), "relation": "eq"},
                "max_score": 1.0 if hits else None,
                "hits": hits,
            },
        }

        aggs = body.get("aggs") or body.get("aggregations")
        if aggs:
            sources = [doc.source for _, doc in matched]
            response["aggregations"] = {
                name: self._aggregate(name, agg, sources)
                for name, agg in aggs.items()
            }

        return response

    def _matches_query(self, doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
        """Simple query matching."""
        if "match_all" in query:
            return True

        if "match" in query:
            for field_name, match_query in query["match"].items():
                if isinstance(match_query, dict):
                    search_term = str(match_query.get("query", "")).lower()
                else:
                    search_term = str(match_query).lower()

                doc_value = str(_field_value(doc, field_name) or "").lower()
                if search_term not in doc_value:
                    return False
            return True

        if "multi_match" in query:
            search_term = str(query["multi_match"].get("query", "")).lower()
            return any(
                search_term in str(_field_value(doc, field_name) or "").lower()
                for field_name in query["multi_match"].get("fields", [])
            )

        if "term" in query:
            for field_name, term_value in query["term"].items():
                if isinstance(term_value, dict):
                    term_value = term_value.get("value")
                if _field_value(doc, field_name) != term_value:
                    return False
            return True

        if "terms" in query:
            for field_name, values in query["terms"].items():
                if _field_value(doc, field_name) not in values:
                    return False
            return True

        if "range" in query:
            for field_name, bounds in query["range"].items():
                value = _field_value(doc, field_name)
                if value is None:
                    return False
                if "gte" in bounds and not value >= bounds["gte"]:
                    return False
                if "gt" in bounds and not value > bounds["gt"]:
                    return False
                if "lte" in bounds and not value <= bounds["lte"]:
                    return False
                if "lt" in bounds and not value < bounds["lt"]:
                    return False
            return True

        if "exists" in query:
            return _field_value(doc, query["exists"]["field"]) is not None

        if "prefix" in query:
            for field_name, prefix in query["prefix"].items():
                if isinstance(prefix, dict):
                    prefix = prefix.get("value", "")
                if not str(_field_value(doc, field_name) or "").startswith(prefix):
                    return False
            return True

        if "wildcard" in query:
            for field_name, pattern in query["wildcard"].items():
                if isinstance(pattern, dict):
                    pattern = pattern.get("value", "")
                if not fnmatch.fnmatchcase(str(_field_value(doc, field_name) or ""), pattern):
                    return False
            return True

        if "bool" in query:
            bool_query = query["bool"]

            # Must and filter clauses
            for key in ("must", "filter"):
                for clause in _as_list(bool_query.get(key)):
                    if not self._matches_query(doc, clause):
                        return False

            # Must not clauses
            for must_not_clause in _as_list(bool_query.get("must_not")):
                if self._matches_query(doc, must_not_clause):
                    return False

            # Should clauses (at least one must match)
            should = _as_list(bool_query.get("should"))
            if should and not any(
                self._matches_query(doc, should_clause)
                for should_clause in should
            ):
                return False

            return True

        return True

    def _aggregate(
        self,
        name: str,
        agg: Dict[str, Any],
        sources: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        if "terms" in agg:
            field_name = agg["terms"]["field"]
            counts: Dict[Any, int] = {}
            for source in sources:
                value = _field_value(source, field_name)
                if value is None:
                    continue
                for key in _as_list(value):
                    counts[key] = counts.get(key, 0) + 1

            ordered = sorted(counts.items(), key=lambda item: (-item[1], str(item[0])))
            size = agg["terms"].get("size", 10)
            return {
                "buckets": [
                    {"key": key, "doc_count": count} for key, count in ordered[:size]
                ]
            }

        for kind in ("avg", "stats"):
            if kind in agg:
                values = [
                    _field_value(source, agg[kind]["field"]) for source in sources
                ]
                values = [v for v in values if v is not None]
                avg = sum(values) / len(values) if values else None
                if kind == "avg":
                    return {"value": avg}
                return {
                    "count": len(values),
                    "min": min(values) if values else None,
                    "max": max(values) if values else None,
                    "avg": avg,
                    "sum": sum(values),
                }

        raise ExecutionError(f"Unsupported aggregation for in-memory search: {name}")

    def cluster_health(self) -> Dict[str, Any]:
        return {"status": self.status, "number_of_nodes": self.number_of_nodes}

    def close(self) -> None:
        self._indices.clear()


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _field_value(doc: Dict[str, Any], field_name: str) -> Any:
    value: Any = doc
    for part in field_name.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _sort_spec(sort: Any) -> List[tuple]:
    spec = []
    for entry in _as_list(sort):
        if isinstance(entry, str):
            spec.append((entry, "asc"))
            continue
        for field_name, order in entry.items():
            if isinstance(order, dict):
                order = order.get("order", "asc")
            spec.append((field_name, order))
    return spec


def _sort_key(value: Any, descending: bool = False) -> tuple:
    # Missing values go last in both directions, as with "missing": "_last"
    missing = value is None
    return (not missing if descending else missing, value if not missing else 0)
