"""Query body fragments.

A fragment is a reusable chunk of a request body. Bodies may hold fragment
objects inline, or ``FragmentRef`` markers pointing at fragments registered
by name. ``FragmentParser`` swaps both for their content before a request
is sent.

Example:
    registry = FragmentRegistry()
    registry.register("published", {"term": {"status": "published"}})

    body = {"query": {"bool": {"filter": [FragmentRef("published")]}}}
    FragmentParser(registry).parse(body)
    # {"query": {"bool": {"filter": [{"term": {"status": "published"}}]}}}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple, Union

from elasticsearcher.errors import (
    CircularFragmentError,
    ParentFragmentError,
    UnknownFragmentError,
)

logger = logging.getLogger(__name__)


class Fragment:
    """Base fragment class.

    Parent fragments merge their keys into the mapping that holds them,
    instead of replacing the value under their own key.
    """

    is_parent = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a request body chunk."""
        raise NotImplementedError


class RawFragment(Fragment):
    """Fragment wrapping a plain mapping."""

    def __init__(self, body: Mapping[str, Any], is_parent: bool = False):
        self.body = dict(body)
        self.is_parent = is_parent

    def to_dict(self) -> Dict[str, Any]:
        return self.body

    def __repr__(self) -> str:
        return f"RawFragment({self.body!r}, is_parent={self.is_parent})"


class ParentFragment(Fragment):
    """Makes any fragment merge into the mapping that holds it."""

    is_parent = True

    def __init__(self, fragment: Fragment):
        self.fragment = fragment

    def to_dict(self) -> Dict[str, Any]:
        return self.fragment.to_dict()

    def __repr__(self) -> str:
        return f"ParentFragment({self.fragment!r})"


@dataclass(frozen=True)
class FragmentRef:
    """Placeholder for a fragment registered under ``name``."""
    name: str


class FragmentRegistry:
    """Named fragments that bodies can reference."""

    def __init__(self) -> None:
        self._fragments: Dict[str, Fragment] = {}

    def register(
        self,
        name: str,
        fragment: Union[Fragment, Mapping[str, Any]],
        is_parent: bool = False,
    ) -> "FragmentRegistry":
        """Register a fragment, replacing any previous one with that name.

        Args:
            name: Name used by ``FragmentRef``
            fragment: Fragment object or plain mapping
            is_parent: Merge the fragment into its parent when resolved
        """
        if not isinstance(fragment, Fragment):
            fragment = RawFragment(fragment, is_parent=is_parent)
        elif is_parent and not fragment.is_parent:
            fragment = ParentFragment(fragment)

        if name in self._fragments:
            logger.debug("Replacing fragment %s", name, extra={"fragment": name})

        self._fragments[name] = fragment
        return self

    def get(self, name: str) -> Fragment:
        try:
            return self._fragments[name]
        except KeyError:
            raise UnknownFragmentError(name) from None

    def names(self) -> List[str]:
        return list(self._fragments)

    def __contains__(self, name: object) -> bool:
        return name in self._fragments

    def __len__(self) -> int:
        return len(self._fragments)


class _Chain:
    """Fragments currently being expanded, for cycle detection."""

    def __init__(
        self,
        keys: FrozenSet[Any] = frozenset(),
        labels: Tuple[str, ...] = (),
    ):
        self.keys = keys
        self.labels = labels

    def enter(self, key: Any, label: str) -> "_Chain":
        if key in self.keys:
            raise CircularFragmentError(self.labels + (label,))
        return _Chain(self.keys | {key}, self.labels + (label,))


class FragmentParser:
    """Replaces fragments in a body with their content.

    The body passed in is left untouched; a new structure is returned.
    """

    def __init__(self, registry: Optional[FragmentRegistry] = None):
        self.registry = registry if registry is not None else FragmentRegistry()

    def parse(self, body: Any) -> Any:
        """Resolve every fragment in ``body``, at any depth.

        Raises:
            UnknownFragmentError: a reference names an unregistered fragment
            CircularFragmentError: a fragment ends up referencing itself
            ParentFragmentError: a parent fragment sits outside a mapping
        """
        chain = _Chain()

        # A parent fragment as the whole body merges into an empty one
        if isinstance(body, (Fragment, FragmentRef)):
            fragment, chain = self._resolve(body, chain)
            return self._parse(fragment.to_dict(), chain)

        return self._parse(body, chain)

    def _parse(self, value: Any, chain: _Chain) -> Any:
        if isinstance(value, (Fragment, FragmentRef)):
            fragment, chain = self._resolve(value, chain)
            if fragment.is_parent:
                raise ParentFragmentError(chain.labels[-1])
            return self._parse(fragment.to_dict(), chain)

        if isinstance(value, Mapping):
            return self._parse_mapping(value, chain)

        if isinstance(value, (list, tuple)):
            return [self._parse(item, chain) for item in value]

        return value

    def _parse_mapping(self, body: Mapping[str, Any], chain: _Chain) -> Dict[str, Any]:
        parsed: Dict[str, Any] = {}

        for key, value in body.items():
            if isinstance(value, (Fragment, FragmentRef)):
                fragment, inner = self._resolve(value, chain)
                content = self._parse(fragment.to_dict(), inner)

                if fragment.is_parent:
                    parsed.update(content)
                else:
                    parsed[key] = content
                continue

            parsed[key] = self._parse(value, chain)

        return parsed

    def _resolve(
        self,
        value: Union[Fragment, FragmentRef],
        chain: _Chain,
    ) -> Tuple[Fragment, _Chain]:
        if isinstance(value, FragmentRef):
            return self.registry.get(value.name), chain.enter(value.name, value.name)

        return value, chain.enter(id(value), type(value).__name__)
