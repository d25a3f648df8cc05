"""Resource ownership registry.

When a class is found in a binary's deploy archive, the binary is recorded as
the owner of that class and of its package's resources, so later lookups can
attribute resources correctly.
"""

from __future__ import annotations

import threading

from deployfind.targets import ArtifactHandle, TargetKey


def package_of(qualified_name: str) -> str:
    head, _, _ = qualified_name.rpartition(".")
    return head


class ResourceOwnershipRegistry:
    """Thread-safe, in-memory class/package -> owning binary map."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._classes: dict[str, tuple[TargetKey, ArtifactHandle]] = {}
        self._packages: dict[str, TargetKey] = {}

    def register(self, owner: TargetKey, artifact: ArtifactHandle, qualified_name: str) -> None:
        with self._lock:
            self._classes[qualified_name] = (owner, artifact)
            self._packages[package_of(qualified_name)] = owner

    def owner_of(self, qualified_name: str) -> TargetKey | None:
        with self._lock:
            record = self._classes.get(qualified_name)
        return record[0] if record is not None else None

    def artifact_of(self, qualified_name: str) -> ArtifactHandle | None:
        with self._lock:
            record = self._classes.get(qualified_name)
        return record[1] if record is not None else None

    def package_owner(self, package: str) -> TargetKey | None:
        with self._lock:
            return self._packages.get(package)

    def __len__(self) -> int:
        with self._lock:
            return len(self._classes)
