"""Generation-keyed memoization with compute-once-per-key semantics.

A GenerationCache holds at most one value per generation number. The first
caller for a generation computes the value under that generation's lock;
concurrent callers for the same generation block on the lock and then read
the stored result, so N consumers going stale at once trigger one computation.

Only the newest generation seen is retained. Entries for older generations
are dropped when a newer one is requested or when discard_before() is called.
If a computation raises, nothing is stored and the next caller retries.
"""

from __future__ import annotations

import threading
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

_UNSET = object()


class _Entry:
    __slots__ = ("lock", "value")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.value: object = _UNSET


class GenerationCache(Generic[T]):
    """A value per generation, computed at most once."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[int, _Entry] = {}
        self._newest = -1

    def get(self, generation: int, compute: Callable[[], T]) -> T:
        """Return the value for generation, computing it if this is the first request."""
        with self._lock:
            entry = self._entries.get(generation)
            if entry is None:
                entry = _Entry()
                self._entries[generation] = entry
                if generation > self._newest:
                    self._newest = generation
                    self._prune(generation)

        with entry.lock:
            if entry.value is _UNSET:
                entry.value = compute()
            return entry.value  # type: ignore[return-value]

    def peek(self, generation: int) -> T | None:
        """The stored value for generation, or None without computing."""
        with self._lock:
            entry = self._entries.get(generation)
        if entry is None or entry.value is _UNSET:
            return None
        return entry.value  # type: ignore[return-value]

    def discard_before(self, generation: int) -> None:
        with self._lock:
            self._prune(generation)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def generations(self) -> list[int]:
        """Generations currently held. Useful for testing."""
        with self._lock:
            return sorted(self._entries)

    def _prune(self, generation: int) -> None:
        for stale in [g for g in self._entries if g < generation]:
            del self._entries[stale]

    def __repr__(self) -> str:
        return f"GenerationCache(generations={self.generations()})"
