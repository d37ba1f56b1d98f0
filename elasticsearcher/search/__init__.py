"""Query building module.

Provides:
- Search client wrappers
- Index registry
- Fragments and fragment parsing
- Query DSL and aggregation fragments
- Query base class and result parsers
"""

from elasticsearcher.search.client import (
    ALL_INDICES,
    SearchClient,
    ElasticsearchClient,
    InMemorySearchClient,
)
from elasticsearcher.search.indices import Index, IndicesManager
from elasticsearcher.search.fragments import (
    Fragment,
    RawFragment,
    FragmentRef,
    FragmentRegistry,
    FragmentParser,
)
from elasticsearcher.search.dsl import (
    MatchAll,
    Match,
    MultiMatch,
    Term,
    Terms,
    Range,
    Exists,
    Prefix,
    Wildcard,
    Bool,
    Paginated,
    Sorted,
)
from elasticsearcher.search.aggregations import (
    Aggregation,
    Aggregations,
    TermsAggregation,
    DateHistogramAggregation,
    AvgAggregation,
    StatsAggregation,
)
from elasticsearcher.search.parsers import (
    ResultParser,
    ArrayResultParser,
    HitsResultParser,
    AggregationsResultParser,
    SearchHit,
    SearchResult,
)
from elasticsearcher.search.query import AbstractQuery

__all__ = [
    # Client
    "ALL_INDICES",
    "SearchClient",
    "ElasticsearchClient",
    "InMemorySearchClient",
    # Indices
    "Index",
    "IndicesManager",
    # Fragments
    "Fragment",
    "RawFragment",
    "FragmentRef",
    "FragmentRegistry",
    "FragmentParser",
    # DSL
    "MatchAll",
    "Match",
    "MultiMatch",
    "Term",
    "Terms",
    "Range",
    "Exists",
    "Prefix",
    "Wildcard",
    "Bool",
    "Paginated",
    "Sorted",
    # Aggregations
    "Aggregation",
    "Aggregations",
    "TermsAggregation",
    "DateHistogramAggregation",
    "AvgAggregation",
    "StatsAggregation",
    # Results
    "ResultParser",
    "ArrayResultParser",
    "HitsResultParser",
    "AggregationsResultParser",
    "SearchHit",
    "SearchResult",
    # Query
    "AbstractQuery",
]
