"""Append-only cache of resolved markers, keyed by namespace name."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

logger = logging.getLogger(__name__)


class CacheState(Enum):
    UNQUERIED = "unqueried"
    PRESENT = "present"
    ABSENT = "absent"


class CacheConflictError(AssertionError):
    """An entry was about to be cached in the UNQUERIED state."""


@dataclass(frozen=True)
class CacheEntry:
    """Resolution state of one namespace. ``marker`` is set only when PRESENT."""

    state: CacheState
    marker: Any = None

    @classmethod
    def of(cls, marker: Any) -> CacheEntry:
        return ABSENT if marker is None else cls(CacheState.PRESENT, marker)

    @property
    def known(self) -> bool:
        return self.state is not CacheState.UNQUERIED

    @property
    def value(self) -> Any:
        return self.marker if self.state is CacheState.PRESENT else None


UNQUERIED = CacheEntry(CacheState.UNQUERIED)
ABSENT = CacheEntry(CacheState.ABSENT)


@dataclass
class ResolutionCache:
    """Namespace name -> CacheEntry. Entries are added, never removed or altered."""

    entries: dict[str, CacheEntry] = field(default_factory=dict)

    def get(self, name: str) -> CacheEntry:
        return self.entries.get(name, UNQUERIED)

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def add_all(self, resolved: Iterable[tuple[str, CacheEntry]]) -> None:
        """
        Insert a batch of resolved entries. The first writer wins: a name that
        is already cached keeps its entry, and the batch entry for it is dropped.
        """
        batch = dict(resolved)
        for name, entry in batch.items():
            if not entry.known:
                raise CacheConflictError(f"Refusing to cache {name!r} as unqueried")
        for name, entry in batch.items():
            existing = self.entries.get(name)
            if existing is None:
                self.entries[name] = entry
            elif existing.state is not entry.state or existing.marker is not entry.marker:
                # e.g. resolved by a module while it was being imported
                logger.debug(f"Keeping cached {name!r} as {existing!r}, dropping {entry!r}")

    def count(self, state: CacheState) -> int:
        return sum(1 for entry in self.entries.values() if entry.state is state)


__all__ = [
    "ABSENT",
    "UNQUERIED",
    "CacheConflictError",
    "CacheEntry",
    "CacheState",
    "ResolutionCache",
]
