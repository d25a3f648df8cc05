"""Deploy archive access: locating archives on disk and finding class entries.

ArtifactLocationDecoder maps a target's ArtifactLocation onto the output base
and reports a missing file as None. ZipArchiveReader searches a jar for the
entry of a fully-qualified class name; any failure to open the jar surfaces
as ArchiveReadError.
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import Iterator

from deployfind.errors import ArchiveReadError
from deployfind.targets import ArtifactHandle, ArtifactLocation

logger = logging.getLogger("deployfind.archive")

CLASS_SUFFIX = ".class"


def class_entry_name(qualified_name: str) -> str:
    """com.x.Foo -> com/x/Foo.class. Nested classes keep their '$'."""
    return qualified_name.replace(".", "/") + CLASS_SUFFIX


def candidate_entry_names(qualified_name: str) -> Iterator[str]:
    """Entry names to try for a class, most literal first.

    A dotted nested class name (com.x.Outer.Inner) is also tried as
    com/x/Outer$Inner.class, nesting from the first capitalized segment on.
    """
    yield class_entry_name(qualified_name)

    parts = qualified_name.split(".")
    first_class = next((i for i, part in enumerate(parts) if part[:1].isupper()), None)
    if first_class is None or first_class == len(parts) - 1:
        return
    package = parts[:first_class]
    nested = "$".join(parts[first_class:])
    yield "/".join(package + [nested]) + CLASS_SUFFIX


class ArtifactLocationDecoder:
    """Resolves artifact locations against an output base directory."""

    __slots__ = ("_output_base",)

    def __init__(self, output_base: str | Path) -> None:
        self._output_base = Path(output_base)

    @property
    def output_base(self) -> Path:
        return self._output_base

    def decode(self, location: ArtifactLocation) -> Path | None:
        """The file for location, or None when it does not exist on disk."""
        path = self._output_base / location.execution_path
        if not path.is_file():
            logger.debug("Could not find archive %s under %s", location.execution_path, self._output_base)
            return None
        return path


class ZipArchiveReader:
    """Finds class entries inside zip-format archives (jars)."""

    def find_entry(self, location: Path, qualified_name: str) -> ArtifactHandle | None:
        try:
            with zipfile.ZipFile(location) as zf:
                for entry in candidate_entry_names(qualified_name):
                    try:
                        zf.getinfo(entry)
                    except KeyError:
                        continue
                    return ArtifactHandle(container=location, entry=entry)
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveReadError(location, e) from e
        return None
