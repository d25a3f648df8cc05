"""deployfind: resolve classes from the deploy archives of dependent binaries."""

from importlib.metadata import version as _version

__version__ = _version("deployfind")

from deployfind.targets import (
    ArtifactHandle,
    ArtifactLocation,
    BinaryTarget,
    ResourceConsumer,
    RuleKind,
    TargetInfo,
    TargetKey,
)
from deployfind.errors import ArchiveReadError, ConfigError, DeployFindError, GraphQueryError
from deployfind.sync_counter import SyncCounter
from deployfind.generation_cache import GenerationCache
from deployfind.graph import TransitiveDependencyGraph, WorkspaceData
from deployfind.reverse_index import ReverseBinaryDependencyMap, ReverseDependencyIndex, build_reverse_index
from deployfind.archive import ArtifactLocationDecoder, ZipArchiveReader, class_entry_name
from deployfind.fallback import OutputDirectoryClassFinder
from deployfind.ownership import ResourceOwnershipRegistry
from deployfind.config import CLASS_FINDER_KEY, Settings, configure, get_settings, is_enabled, load_settings
from deployfind.resolver import DeployJarClassFinder, ResolverState
from deployfind.session import FinderSession
from deployfind.background import LookupHandle, resolve_in_background
# output_groups NOT auto-imported, only build orchestration needs it

__all__ = [
    "ArtifactHandle",
    "ArtifactLocation",
    "BinaryTarget",
    "ResourceConsumer",
    "RuleKind",
    "TargetInfo",
    "TargetKey",
    "DeployFindError",
    "ArchiveReadError",
    "GraphQueryError",
    "ConfigError",
    "SyncCounter",
    "GenerationCache",
    "TransitiveDependencyGraph",
    "WorkspaceData",
    "ReverseBinaryDependencyMap",
    "ReverseDependencyIndex",
    "build_reverse_index",
    "ArtifactLocationDecoder",
    "ZipArchiveReader",
    "class_entry_name",
    "OutputDirectoryClassFinder",
    "ResourceOwnershipRegistry",
    "CLASS_FINDER_KEY",
    "Settings",
    "configure",
    "get_settings",
    "is_enabled",
    "load_settings",
    "DeployJarClassFinder",
    "ResolverState",
    "FinderSession",
    "LookupHandle",
    "resolve_in_background",
]
