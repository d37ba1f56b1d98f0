"""Exceptions raised while building and running search queries."""

from __future__ import annotations

from typing import Optional, Sequence


class ElasticSearcherError(Exception):
    """Base exception for query building and execution errors."""

    pass


class UnknownIndexError(ElasticSearcherError):
    """Index name was never registered with the searcher."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Index '{name}' is not registered")


class DuplicateIndexError(ElasticSearcherError):
    """Another index object is already registered under this name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Index '{name}' is already registered")


class UnknownFragmentError(ElasticSearcherError):
    """Fragment reference points to a name nobody registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Fragment '{name}' is not registered")


class CircularFragmentError(ElasticSearcherError):
    """Fragment references loop back onto themselves."""

    def __init__(self, chain: Sequence[str]):
        self.chain = list(chain)
        super().__init__(
            "Circular fragment reference: " + " -> ".join(self.chain)
        )


class ParentFragmentError(ElasticSearcherError):
    """Parent fragment has no enclosing mapping to merge into."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Parent fragment '{name}' must be the value of a mapping key"
        )


class ExecutionError(ElasticSearcherError):
    """Search could not be executed or has not produced results yet."""

    def __init__(self, message: str, index: Optional[str] = None):
        self.index = index
        super().__init__(message)


class QueryAlreadyRunError(ElasticSearcherError):
    """A query instance was run a second time."""

    pass


__all__ = [
    "ElasticSearcherError",
    "UnknownIndexError",
    "DuplicateIndexError",
    "UnknownFragmentError",
    "CircularFragmentError",
    "ParentFragmentError",
    "ExecutionError",
    "QueryAlreadyRunError",
]
