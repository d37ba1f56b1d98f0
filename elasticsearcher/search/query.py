"""Base class for queries.

Subclasses describe a search in ``setup()``; the base class assembles the
request, sends it through the searcher's client and hands back the
result parser.

Example:
    class ProductsQuery(AbstractQuery):
        def setup(self):
            self.search_in("products")
            self.set_body({
                "query": Match("name", self.get_data("term")),
                "paginate": Paginated(page=self.get_data("page") or 1),
            })

    query = ProductsQuery(searcher)
    query.add_data(term="lamp")
    documents = query.run().results()
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple

from elasticsearcher.errors import QueryAlreadyRunError
from elasticsearcher.search.client import ALL_INDICES
from elasticsearcher.search.fragments import FragmentParser, FragmentRegistry
from elasticsearcher.search.parsers import ArrayResultParser, ResultParser

if TYPE_CHECKING:
    from elasticsearcher.searcher import ElasticSearcher

logger = logging.getLogger(__name__)


class AbstractQuery(ABC):
    """Accumulates targets and body in ``setup()``, then builds and runs.

    One instance runs once: a second ``run()`` raises
    ``QueryAlreadyRunError``. ``get_raw_query()`` may be called any number
    of times; every call starts from empty targets and body.
    """

    def __init__(
        self,
        searcher: "ElasticSearcher",
        fragment_registry: Optional[FragmentRegistry] = None,
    ):
        self.searcher = searcher

        self._indices: List[str] = []
        self._types: List[str] = []
        self._body: Dict[str, Any] = {}
        self._data: Dict[str, Any] = {}
        self._has_run = False

        # Default result parser
        self.parse_results_with(ArrayResultParser())
        self.fragment_parser = FragmentParser(
            fragment_registry if fragment_registry is not None else searcher.fragments
        )

    @abstractmethod
    def setup(self) -> None:
        """Prepare the query: targets, body, filters, sorting."""
        pass

    def add_data(self, data: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> None:
        """Add data that can be read with ``get_data`` during ``setup()``."""
        if data:
            self._data.update(data)
        self._data.update(kwargs)

    def get_data(self, key: Optional[str] = None) -> Any:
        if key is not None:
            return self._data.get(key)
        return dict(self._data)

    def search_in(self, index: str, type: Optional[str] = None) -> None:
        """Search in an index and, optionally, a type of it."""
        self.search_in_index(index)

        if type is not None:
            self.search_in_type(type)

    def search_in_index(self, index: str) -> None:
        name = self.searcher.resolve_index(index).name

        if name not in self._indices:
            self._indices.append(name)

    def search_in_type(self, type: str) -> None:
        if type not in self._types:
            self._types.append(type)

    def set_body(self, body: Mapping[str, Any]) -> None:
        self._body = dict(body)

    @property
    def indices(self) -> Tuple[str, ...]:
        return tuple(self._indices)

    @property
    def types(self) -> Tuple[str, ...]:
        return tuple(self._types)

    @property
    def body(self) -> Dict[str, Any]:
        return dict(self._body)

    @property
    def result_parser(self) -> ResultParser:
        return self._result_parser

    def parse_results_with(self, result_parser: ResultParser) -> None:
        self._result_parser = result_parser

    def build_query(self) -> Dict[str, Any]:
        """Build the query by adding all chunks together."""
        self._indices = []
        self._types = []
        self._body = {}

        self.setup()

        # _all means a cross index search
        query: Dict[str, Any] = {
            "index": ",".join(self._indices) if self._indices else ALL_INDICES,
        }

        # No type searches the entire index
        if self._types:
            query["type"] = ",".join(self._types)

        query["body"] = self.parse_fragments(self._body)

        logger.debug(
            "Built %s",
            type(self).__name__,
            extra={
                "query": type(self).__name__,
                "index": query["index"],
                "type": query.get("type"),
            },
        )
        return query

    def parse_fragments(self, body: Mapping[str, Any]) -> Dict[str, Any]:
        """Replace fragments with their body."""
        return self.fragment_parser.parse(body)

    def get_raw_query(self) -> Dict[str, Any]:
        """The request as it will be sent to the client."""
        return self.build_query()

    def run(self) -> ResultParser:
        """Build and execute the query."""
        if self._has_run:
            raise QueryAlreadyRunError(
                f"{type(self).__name__} has already run, create a new instance"
            )

        query = self.build_query()
        started = time.perf_counter()

        try:
            raw_results = self.searcher.client.search(**query)
        except Exception:
            logger.error(
                "Search failed for %s",
                type(self).__name__,
                extra={"query": type(self).__name__, "index": query["index"]},
                exc_info=True,
            )
            raise

        self._has_run = True
        latency_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.info(
            "Ran %s",
            type(self).__name__,
            extra={
                "query": type(self).__name__,
                "index": query["index"],
                "latency_ms": latency_ms,
            },
        )

        # Pass response to the class that will do something with it
        self._result_parser.set_raw_results(raw_results)
        return self._result_parser
