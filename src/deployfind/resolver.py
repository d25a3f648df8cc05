"""Class artifact resolver: find a class in the deploy archive of a dependent binary.

A resource consumer's own compiled output is not loadable at render time, so
classes are looked up in the deploy archives of binaries that depend on the
consumer's resource targets. Any of those binaries may not have been built,
or may have been built without the class, so several are tried in turn.

Candidates are rebuilt from the reverse index whenever the sync generation
changes; within one generation they are fixed. The scan starts at a rotation
cursor which moves one past the binary that produced the last hit, spreading
lookups across binaries instead of always probing the first one. When no
candidate has the class, the fallback finder is asked once.

All mutable per-consumer state lives in a single immutable ResolverState
value. Each lookup holds the finder's lock from the freshness check through
the cursor update, so lookups on one consumer are serialized.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import Callable

from deployfind.archive import ArtifactLocationDecoder, ZipArchiveReader
from deployfind.errors import ArchiveReadError
from deployfind.fallback import OutputDirectoryClassFinder
from deployfind.interfaces import (
    ArchiveReader,
    FallbackResolver,
    LocationDecoder,
    OwnershipRegistry,
    TargetMetadataProvider,
)
from deployfind.reverse_index import ReverseBinaryDependencyMap
from deployfind.sync_counter import SyncCounter
from deployfind.targets import ArtifactHandle, ResourceConsumer, TargetKey

logger = logging.getLogger("deployfind.resolver")

# Never equal to a live generation, so the first lookup always computes candidates.
_NEVER = -1


@dataclass(frozen=True)
class ResolverState:
    candidate_binaries: tuple[TargetKey, ...] = ()
    rotation_cursor: int = 0
    cached_generation: int = _NEVER


class DeployJarClassFinder:
    """Resolves fully-qualified class names for one resource consumer."""

    def __init__(
        self,
        consumer: ResourceConsumer,
        counter: SyncCounter,
        rdeps: ReverseBinaryDependencyMap,
        metadata: Callable[[], TargetMetadataProvider | None],
        decoder: LocationDecoder | None = None,
        reader: ArchiveReader | None = None,
        fallback: FallbackResolver | None = None,
        registry: OwnershipRegistry | None = None,
        *,
        sort_candidates: bool = False,
    ) -> None:
        self._consumer = consumer
        self._counter = counter
        self._rdeps = rdeps
        self._metadata = metadata
        self._decoder = decoder if decoder is not None else ArtifactLocationDecoder(".")
        self._reader = reader if reader is not None else ZipArchiveReader()
        self._fallback = fallback if fallback is not None else OutputDirectoryClassFinder()
        self._registry = registry
        self._sort_candidates = sort_candidates
        self._lock = threading.Lock()
        self._state = ResolverState()

    @property
    def consumer(self) -> ResourceConsumer:
        return self._consumer

    @property
    def state(self) -> ResolverState:
        with self._lock:
            return self._state

    def replace_consumer(self, consumer: ResourceConsumer) -> None:
        """Swap in the consumer object from a newer sync. Takes effect on the next generation."""
        with self._lock:
            self._consumer = consumer

    def candidate_binaries(self) -> tuple[TargetKey, ...]:
        with self._lock:
            return self._ensure_fresh().candidate_binaries

    def should_skip_resource_registration(self) -> bool:
        return False

    def resolve(self, qualified_name: str) -> ArtifactHandle | None:
        found = self._scan(qualified_name)
        if found is not None:
            binary, handle = found
            if self._registry is not None:
                self._registry.register(binary, handle, qualified_name)
            return handle
        return self._fallback.resolve(qualified_name)

    def _scan(self, qualified_name: str) -> tuple[TargetKey, ArtifactHandle] | None:
        """Probe candidates from the cursor on. Holds the lock for the whole scan."""
        with self._lock:
            state = self._ensure_fresh()
            candidates = state.candidate_binaries
            n = len(candidates)
            if n:
                metadata = self._metadata()
                for step in range(n):
                    index = (state.rotation_cursor + step) % n
                    binary = candidates[index]
                    handle = self._probe(metadata, binary, qualified_name)
                    if handle is None:
                        continue
                    self._state = replace(state, rotation_cursor=(index + 1) % n)
                    return binary, handle

            self._log_exhausted(candidates, qualified_name)
            return None

    def _ensure_fresh(self) -> ResolverState:
        """Recompute candidates if the generation moved. Caller holds the lock."""
        if self._state.cached_generation == self._counter.current_generation():
            return self._state

        generation, index = self._rdeps.get()
        candidates = index.binaries_for(self._consumer.source_target_keys)
        if self._sort_candidates:
            candidates = tuple(sorted(candidates))
        self._state = ResolverState(candidates, 0, generation)
        logger.debug(
            "%s: %d candidate binaries at generation %d",
            self._consumer.name, len(candidates), generation,
        )
        return self._state

    def _probe(
        self,
        metadata: TargetMetadataProvider | None,
        binary: TargetKey,
        qualified_name: str,
    ) -> ArtifactHandle | None:
        """The class entry in binary's deploy archive, or None on any kind of miss."""
        if metadata is None:
            return None
        location = metadata.archive_location_of(binary)
        if location is None:
            logger.debug("%s has no deploy archive", binary)
            return None
        path = self._decoder.decode(location)
        if path is None:
            return None
        try:
            return self._reader.find_entry(path, qualified_name)
        except (ArchiveReadError, OSError):
            logger.debug("Could not read deploy archive of %s", binary, exc_info=True)
            return None

    def _log_exhausted(self, candidates: tuple[TargetKey, ...], qualified_name: str) -> None:
        if not candidates:
            logger.warning(
                "No binaries for %s, cannot resolve %s from a deploy archive",
                self._consumer.name, qualified_name,
            )
            return
        logger.warning(
            "Could not find %s\nConsumer: %s\nBinary targets (%d):\n  %s",
            qualified_name,
            self._consumer.name,
            len(candidates),
            "\n  ".join(str(binary) for binary in candidates),
        )

    def __repr__(self) -> str:
        state = self.state
        return (
            f"DeployJarClassFinder({self._consumer.name}, "
            f"{len(state.candidate_binaries)} candidates, cursor={state.rotation_cursor})"
        )
