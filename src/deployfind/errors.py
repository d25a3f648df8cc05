"""Exception hierarchy for deployfind."""

from __future__ import annotations


class DeployFindError(Exception):
    """Base class for all deployfind errors."""


class ArchiveReadError(DeployFindError):
    """An archive exists but could not be opened or listed."""

    def __init__(self, path, cause: BaseException | None = None) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot read archive {path}: {cause}")


class GraphQueryError(DeployFindError):
    """The dependency graph oracle could not answer a reachability query."""


class ConfigError(DeployFindError):
    """Settings file is unreadable or malformed."""
