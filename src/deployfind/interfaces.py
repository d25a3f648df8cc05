"""Collaborator protocols.

The resolver core never builds graphs, archives or registries itself; it talks
to these interfaces. deployfind ships in-memory/zip implementations of each
(see graph, archive, ownership, fallback), but anything structurally matching
works.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, AbstractSet, Iterable, Protocol

if TYPE_CHECKING:
    from deployfind.targets import (
        ArtifactHandle,
        ArtifactLocation,
        BinaryTarget,
        ResourceConsumer,
        RuleKind,
        TargetKey,
    )


class DependencyGraphOracle(Protocol):
    def reachable_subset(
        self, source: TargetKey, candidates: AbstractSet[TargetKey]
    ) -> AbstractSet[TargetKey]:
        """Members of candidates reachable from source along dependency edges."""
        ...


class TargetMetadataProvider(Protocol):
    def kind_of(self, key: TargetKey) -> RuleKind: ...

    def archive_location_of(self, key: TargetKey) -> ArtifactLocation | None: ...


class WorkspaceSnapshot(TargetMetadataProvider, Protocol):
    """Everything one sync knows: metadata, consumers and the oracle."""

    @property
    def consumers(self) -> Iterable[ResourceConsumer]: ...

    @property
    def oracle(self) -> DependencyGraphOracle: ...

    def binary_targets(self) -> Iterable[BinaryTarget]: ...


class LocationDecoder(Protocol):
    def decode(self, location: ArtifactLocation) -> Path | None: ...


class ArchiveReader(Protocol):
    def find_entry(self, location: Path, qualified_name: str) -> ArtifactHandle | None: ...


class OwnershipRegistry(Protocol):
    def register(self, owner: TargetKey, artifact: ArtifactHandle, qualified_name: str) -> None: ...


class FallbackResolver(Protocol):
    def resolve(self, qualified_name: str) -> ArtifactHandle | None: ...
