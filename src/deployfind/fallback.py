"""Fallback class finder: ordinary compiled output, no deploy archives.

Used when a consumer has no candidate binaries, when none of them contains
the class, or when the deploy-archive finder is disabled altogether.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from deployfind.archive import ZipArchiveReader, candidate_entry_names
from deployfind.errors import ArchiveReadError
from deployfind.targets import ArtifactHandle

logger = logging.getLogger("deployfind.fallback")

FALLBACK_FINDER_KEY = "PsiBasedClassFileFinder"


class OutputDirectoryClassFinder:
    """Searches class directories and jars in order. First hit wins."""

    def __init__(self, roots: Iterable[str | Path] = ()) -> None:
        self._roots = tuple(Path(root) for root in roots)
        self._reader = ZipArchiveReader()

    @property
    def roots(self) -> tuple[Path, ...]:
        return self._roots

    def resolve(self, qualified_name: str) -> ArtifactHandle | None:
        for root in self._roots:
            if root.is_dir():
                for entry in candidate_entry_names(qualified_name):
                    if (root / entry).is_file():
                        return ArtifactHandle(container=root, entry=entry, in_archive=False)
            elif root.is_file():
                try:
                    handle = self._reader.find_entry(root, qualified_name)
                except ArchiveReadError:
                    logger.debug("Skipping unreadable output jar %s", root, exc_info=True)
                    continue
                if handle is not None:
                    return handle
        return None

    def should_skip_resource_registration(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"OutputDirectoryClassFinder({len(self._roots)} roots)"
