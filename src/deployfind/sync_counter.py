"""Sync generation counter: the cache-invalidation token for everything downstream.

One counter per workspace. It starts at 0 ("no sync has completed") and advances
by exactly one every time a graph refresh completes, whether the refresh
succeeded or not. Readers compare a remembered generation against
current_generation(); nothing holds a lock across a resolution.

Listeners registered with subscribe() are called after each advance with the
new generation number, outside the counter's lock.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

logger = logging.getLogger("deployfind.sync_counter")

Disposer = Callable[[], None]


class SyncCounter:
    """Monotonic, thread-safe generation counter."""

    __slots__ = ("_lock", "_generation", "_listeners")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._generation = 0
        self._listeners: list[Callable[[int], None]] = []

    def current_generation(self) -> int:
        with self._lock:
            return self._generation

    def on_refresh_completed(self) -> None:
        """Advance the generation. Called once per completed refresh."""
        with self._lock:
            self._generation += 1
            generation = self._generation
            listeners = list(self._listeners)
        logger.info("Sync completed, generation is now %d", generation)
        for listener in listeners:
            listener(generation)

    def subscribe(self, callback: Callable[[int], None]) -> Disposer:
        """Register a callback for new generations. Returns a function that removes it."""
        with self._lock:
            self._listeners.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                try:
                    self._listeners.remove(callback)
                except ValueError:
                    pass  # already removed

        return _unsubscribe

    def __repr__(self) -> str:
        return f"SyncCounter(generation={self.current_generation()})"
