"""Search Index Registry.

Queries may only target indices that were registered with the searcher.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Tuple

from elasticsearcher.errors import DuplicateIndexError, UnknownIndexError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Index:
    """An index queries can search in."""
    name: str
    types: Tuple[str, ...] = ()


class IndicesManager:
    """Registry of the indices known to a searcher."""

    def __init__(self) -> None:
        self._indices: Dict[str, Index] = {}

    def register(self, index: Index) -> "IndicesManager":
        """Register an index.

        Registering the same index again is a no-op; a different index
        under an existing name is rejected.
        """
        existing = self._indices.get(index.name)
        if existing is not None:
            if existing == index:
                return self
            raise DuplicateIndexError(index.name)

        self._indices[index.name] = index
        logger.debug("Registered index %s", index.name, extra={"index": index.name})
        return self

    def register_indices(self, indices: Iterable[Index]) -> "IndicesManager":
        for index in indices:
            self.register(index)
        return self

    def unregister(self, name: str) -> None:
        if name not in self._indices:
            raise UnknownIndexError(name)
        del self._indices[name]
        logger.debug("Unregistered index %s", name, extra={"index": name})

    def is_registered(self, name: str) -> bool:
        return name in self._indices

    def registered(self) -> Dict[str, Index]:
        return dict(self._indices)

    def get_registered(self, name: str) -> Index:
        """Get a registered index by name.

        Raises:
            UnknownIndexError: if the index was never registered
        """
        try:
            return self._indices[name]
        except KeyError:
            raise UnknownIndexError(name) from None
