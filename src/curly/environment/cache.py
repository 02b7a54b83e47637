"""Compilation cache: exact source string → compiled Template.

Keys are the source text exactly as given. Two templates that differ only in
whitespace are separate entries. Entries are never evicted; the cache grows
until ``clear()`` is called.

"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from curly.template import Template


@dataclass(slots=True)
class CacheEntry:
    """One cached compilation and its usage counters."""

    template: Template
    source: str
    compiled_at: float
    use_count: int = 1
    last_used_at: float = 0.0

    def touch(self) -> None:
        self.use_count += 1
        self.last_used_at = time.time()


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Snapshot returned by ``Environment.get_cache_stats()``.

    Attributes:
        size: Number of cached source strings
        total_usage: Sum of use counts (a fresh entry counts 1)
        average_usage: total_usage / size, 0 when empty
    """

    size: int
    total_usage: int
    average_usage: float


class CompilationCache:
    """Unbounded map of source text to CacheEntry.

    Example:
        >>> cache = CompilationCache()
        >>> cache.get("{{x}}") is None
        True

    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    def get(self, source: str) -> CacheEntry | None:
        """Return the entry for ``source`` and count the use, or None."""
        entry = self._entries.get(source)
        if entry is not None:
            entry.touch()
        return entry

    def put(self, source: str, template: Template) -> CacheEntry:
        now = time.time()
        entry = CacheEntry(template, source, compiled_at=now, last_used_at=now)
        self._entries[source] = entry
        return entry

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> CacheStats:
        size = len(self._entries)
        total = sum(entry.use_count for entry in self._entries.values())
        return CacheStats(size=size, total_usage=total, average_usage=total / size if size else 0.0)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, source: object) -> bool:
        return source in self._entries
