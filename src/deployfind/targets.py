"""Build-graph data model: targets, artifact locations, resolved artifacts.

Everything here is immutable and hashable by value. A sync produces a fresh
set of these objects; nothing is mutated in place across generations.
"""

from __future__ import annotations

import enum
import zipfile
from dataclasses import dataclass, field
from pathlib import Path


class RuleKind(enum.Enum):
    """Build-rule classification, as reported by target metadata."""

    BINARY = "binary"
    LIBRARY = "library"
    TEST = "test"
    UNKNOWN = "unknown"


@dataclass(frozen=True, order=True)
class TargetKey:
    """Identifier for a build target. Equality is by value."""

    label: str
    aspect_ids: tuple[str, ...] = ()

    @classmethod
    def from_label(cls, label: str) -> TargetKey:
        return cls(label)

    def __str__(self) -> str:
        if not self.aspect_ids:
            return self.label
        return f"{self.label}#{'-'.join(self.aspect_ids)}"


@dataclass(frozen=True)
class ArtifactLocation:
    """Location of a build output, relative to the output base."""

    relative_path: str
    root_execution_path_fragment: str = ""

    @property
    def execution_path(self) -> str:
        if not self.root_execution_path_fragment:
            return self.relative_path
        return f"{self.root_execution_path_fragment}/{self.relative_path}"


@dataclass(frozen=True)
class TargetInfo:
    """Metadata for one target: its rule kind and, for binaries, its archive."""

    key: TargetKey
    kind: RuleKind = RuleKind.LIBRARY
    archive: ArtifactLocation | None = None


@dataclass(frozen=True)
class BinaryTarget:
    """A binary-kind target and its (possibly absent) deploy archive."""

    key: TargetKey
    archive: ArtifactLocation | None = None


@dataclass(frozen=True)
class ResourceConsumer:
    """A named scope owning the resource targets whose binaries must be found."""

    name: str
    source_target_keys: tuple[TargetKey, ...] = field(default=())

    def __post_init__(self) -> None:
        # Accept any iterable of keys but store a tuple so the consumer stays hashable.
        object.__setattr__(self, "source_target_keys", tuple(self.source_target_keys))


@dataclass(frozen=True)
class ArtifactHandle:
    """A resolved class file, either inside an archive or in a class directory."""

    container: Path
    entry: str
    in_archive: bool = True

    def read_bytes(self) -> bytes:
        if self.in_archive:
            with zipfile.ZipFile(self.container) as zf:
                return zf.read(self.entry)
        return (self.container / self.entry).read_bytes()

    def __str__(self) -> str:
        sep = "!/" if self.in_archive else "/"
        return f"{self.container}{sep}{self.entry}"
