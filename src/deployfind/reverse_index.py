"""Reverse binary dependency index: resource target -> binaries that depend on it.

For every binary-kind target B in the workspace:
- if B is itself a resource target, it maps to itself (its own archive holds
  its own resources);
- the oracle is asked once which resource targets are reachable from B, and
  each of those maps to B.

The index is rebuilt from scratch for every generation and cached, never
updated incrementally. With no workspace data the index is empty.

Usage:
    rdeps = ReverseBinaryDependencyMap(counter, session_snapshot)
    generation, index = rdeps.get()
    index.binaries_for(consumer.source_target_keys)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Callable, Iterable, Iterator

from deployfind.errors import GraphQueryError
from deployfind.generation_cache import GenerationCache
from deployfind.interfaces import WorkspaceSnapshot
from deployfind.sync_counter import SyncCounter
from deployfind.targets import TargetKey

logger = logging.getLogger("deployfind.reverse_index")

Snapshot = Callable[[], "tuple[int, WorkspaceSnapshot | None]"]


class ReverseDependencyIndex(Mapping):
    """Immutable mapping of resource target to an ordered tuple of distinct binaries."""

    __slots__ = ("_data",)

    def __init__(self, data: dict[TargetKey, tuple[TargetKey, ...]] | None = None) -> None:
        self._data = dict(data) if data else {}

    def __getitem__(self, key: TargetKey) -> tuple[TargetKey, ...]:
        return self._data[key]

    def __iter__(self) -> Iterator[TargetKey]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def binaries_for(self, keys: Iterable[TargetKey]) -> tuple[TargetKey, ...]:
        """Union of the binaries for each key, in lookup order, first occurrence kept."""
        seen: dict[TargetKey, None] = {}
        for key in keys:
            for binary in self._data.get(key, ()):
                seen.setdefault(binary, None)
        return tuple(seen)

    def __repr__(self) -> str:
        return f"ReverseDependencyIndex({len(self._data)} resource targets)"


EMPTY_INDEX = ReverseDependencyIndex()


def resource_targets_of(data: WorkspaceSnapshot) -> frozenset[TargetKey]:
    """All source target keys across every resource consumer."""
    return frozenset(key for consumer in data.consumers for key in consumer.source_target_keys)


def build_reverse_index(data: WorkspaceSnapshot | None) -> ReverseDependencyIndex:
    """Compute the reverse index for one workspace snapshot."""
    if data is None:
        return EMPTY_INDEX

    resource_targets = resource_targets_of(data)
    if not resource_targets:
        return EMPTY_INDEX

    builder: dict[TargetKey, dict[TargetKey, None]] = {}
    binary_count = 0
    for target in data.binary_targets():
        binary = target.key
        binary_count += 1
        if binary in resource_targets:
            builder.setdefault(binary, {})[binary] = None

        try:
            reachable = data.oracle.reachable_subset(binary, resource_targets)
        except GraphQueryError:
            logger.warning("Dependency query failed for %s, skipping it", binary, exc_info=True)
            continue

        for resource in reachable:
            builder.setdefault(resource, {})[binary] = None

    logger.info(
        "Reverse binary index: %d of %d resource targets covered by %d binaries",
        len(builder), len(resource_targets), binary_count,
    )
    return ReverseDependencyIndex({key: tuple(binaries) for key, binaries in builder.items()})


class ReverseBinaryDependencyMap:
    """Per-generation cached reverse index for one workspace.

    snapshot() must return the live generation together with the workspace
    data that generation describes, read atomically.
    """

    def __init__(self, counter: SyncCounter, snapshot: Snapshot) -> None:
        self._snapshot = snapshot
        self._cache: GenerationCache[ReverseDependencyIndex] = GenerationCache()
        self._unsubscribe = counter.subscribe(self._cache.discard_before)

    def get(self) -> tuple[int, ReverseDependencyIndex]:
        """The live generation and its index, building the index on first request."""
        generation, data = self._snapshot()
        index = self._cache.get(generation, lambda: build_reverse_index(data))
        return generation, index

    def dispose(self) -> None:
        self._unsubscribe()
        self._cache.clear()

    def __repr__(self) -> str:
        return f"ReverseBinaryDependencyMap({self._cache!r})"
