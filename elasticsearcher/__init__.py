"""Declarative query building on top of the Elasticsearch client."""

from elasticsearcher.config import SearcherSettings, get_settings
from elasticsearcher.errors import (
    CircularFragmentError,
    DuplicateIndexError,
    ElasticSearcherError,
    ExecutionError,
    QueryAlreadyRunError,
    UnknownFragmentError,
    UnknownIndexError,
)
from elasticsearcher.search import (
    AbstractQuery,
    ArrayResultParser,
    FragmentRef,
    Index,
    ResultParser,
)
from elasticsearcher.searcher import ElasticSearcher

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ElasticSearcher",
    "SearcherSettings",
    "get_settings",
    "AbstractQuery",
    "Index",
    "FragmentRef",
    "ResultParser",
    "ArrayResultParser",
    "ElasticSearcherError",
    "UnknownIndexError",
    "DuplicateIndexError",
    "UnknownFragmentError",
    "CircularFragmentError",
    "ExecutionError",
    "QueryAlreadyRunError",
]
