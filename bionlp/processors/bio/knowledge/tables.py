"""Read-only lookup tables built from the knowledge-base files."""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional

from .._text_utils import normalize_surface


class ProtectedTermTable:
    """Surface strings that must never be split on internal punctuation.

    Membership is case-sensitive.
    """

    def __init__(self, terms: Iterable[str] = ()):
        self._terms = frozenset(t for t in terms if t)
        self._max_length = max((len(t) for t in self._terms), default=0)

    def __contains__(self, term: object) -> bool:
        return term in self._terms

    def __len__(self) -> int:
        return len(self._terms)

    def __iter__(self) -> Iterator[str]:
        return iter(self._terms)

    @property
    def max_length(self) -> int:
        """Length of the longest protected term (bounds candidate search)."""
        return self._max_length


class Gazetteer:
    """Mapping from normalized surface form to entity type."""

    def __init__(self, entries: Optional[Mapping[str, str]] = None):
        table: Dict[str, str] = {}
        for surface, entity_type in (entries or {}).items():
            key = normalize_surface(surface)
            if key and key not in table:
                table[key] = entity_type
        self._entries = MappingProxyType(table)
        self._max_length = max((len(k) for k in table), default=0)

    def lookup(self, surface: str) -> Optional[str]:
        """Entity type for *surface*, or None. *surface* is normalized first."""
        return self._entries.get(normalize_surface(surface))

    def __contains__(self, surface: object) -> bool:
        return isinstance(surface, str) and self.lookup(surface) is not None

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> Mapping[str, str]:
        return self._entries

    @property
    def entity_types(self) -> set:
        return set(self._entries.values())

    @property
    def max_length(self) -> int:
        """Length of the longest normalized key."""
        return self._max_length
