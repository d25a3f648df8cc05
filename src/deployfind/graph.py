"""In-memory dependency graph and the per-sync workspace snapshot.

TransitiveDependencyGraph answers bounded reachability queries: "which of
these candidates can be reached from this target". The walk stops as soon as
every candidate has been found, so a query against a small candidate set
does not pay for a binary's entire transitive closure.

WorkspaceData bundles one sync's target metadata, resource consumers and
graph. It is immutable; a resync produces a new one.
"""

from __future__ import annotations

from collections import deque
from types import MappingProxyType
from typing import AbstractSet, Iterable, Iterator, Mapping

from deployfind.interfaces import DependencyGraphOracle
from deployfind.targets import (
    ArtifactLocation,
    BinaryTarget,
    ResourceConsumer,
    RuleKind,
    TargetInfo,
    TargetKey,
)


class TransitiveDependencyGraph:
    """Direct-dependency edges with a breadth-first reachability query."""

    __slots__ = ("_edges",)

    def __init__(self, edges: Mapping[TargetKey, Iterable[TargetKey]] | None = None) -> None:
        self._edges: dict[TargetKey, tuple[TargetKey, ...]] = {
            key: tuple(deps) for key, deps in (edges or {}).items()
        }

    def direct_deps(self, key: TargetKey) -> tuple[TargetKey, ...]:
        return self._edges.get(key, ())

    def reachable_subset(
        self, source: TargetKey, candidates: AbstractSet[TargetKey]
    ) -> frozenset[TargetKey]:
        """Candidates reachable from source. source itself only counts via a cycle."""
        if not candidates:
            return frozenset()

        found: set[TargetKey] = set()
        seen: set[TargetKey] = set()
        queue = deque(self.direct_deps(source))
        while queue and len(found) < len(candidates):
            key = queue.popleft()
            if key in seen:
                continue
            seen.add(key)
            if key in candidates:
                found.add(key)
            queue.extend(dep for dep in self.direct_deps(key) if dep not in seen)
        return frozenset(found)

    def __len__(self) -> int:
        return len(self._edges)

    def __repr__(self) -> str:
        return f"TransitiveDependencyGraph({len(self._edges)} targets)"


class WorkspaceData:
    """Snapshot of one sync: target metadata, resource consumers, dependency oracle."""

    __slots__ = ("_targets", "_consumers", "_oracle")

    def __init__(
        self,
        targets: Iterable[TargetInfo] = (),
        consumers: Iterable[ResourceConsumer] = (),
        oracle: DependencyGraphOracle | None = None,
    ) -> None:
        self._targets: Mapping[TargetKey, TargetInfo] = MappingProxyType(
            {info.key: info for info in targets}
        )
        self._consumers = tuple(consumers)
        self._oracle = oracle if oracle is not None else TransitiveDependencyGraph()

    @property
    def targets(self) -> Mapping[TargetKey, TargetInfo]:
        return self._targets

    @property
    def consumers(self) -> tuple[ResourceConsumer, ...]:
        return self._consumers

    @property
    def oracle(self) -> DependencyGraphOracle:
        return self._oracle

    def kind_of(self, key: TargetKey) -> RuleKind:
        info = self._targets.get(key)
        return info.kind if info is not None else RuleKind.UNKNOWN

    def archive_location_of(self, key: TargetKey) -> ArtifactLocation | None:
        info = self._targets.get(key)
        return info.archive if info is not None else None

    def binary_targets(self) -> Iterator[BinaryTarget]:
        """Binary-kind targets in declaration order."""
        return (
            BinaryTarget(info.key, info.archive)
            for info in self._targets.values()
            if self.kind_of(info.key) is RuleKind.BINARY
        )

    def consumer(self, name: str) -> ResourceConsumer | None:
        for consumer in self._consumers:
            if consumer.name == name:
                return consumer
        return None

    def __repr__(self) -> str:
        return f"WorkspaceData({len(self._targets)} targets, {len(self._consumers)} consumers)"
