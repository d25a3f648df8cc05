"""FinderSession: the entry point build orchestration and render code call.

One session per workspace. It owns the workspace snapshot from the latest
sync, the generation counter, the cached reverse index and one class finder
per resource consumer (keyed by consumer name).

Usage:
    session = FinderSession(settings=load_settings(path))
    session.on_sync_completed(WorkspaceData(targets, consumers, graph))
    handle = session.resolve_class(consumer, "com.x.Foo")
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from deployfind.archive import ArtifactLocationDecoder, ZipArchiveReader
from deployfind.config import Settings, get_settings, is_enabled
from deployfind.fallback import OutputDirectoryClassFinder
from deployfind.interfaces import (
    ArchiveReader,
    FallbackResolver,
    LocationDecoder,
    WorkspaceSnapshot,
)
from deployfind.ownership import ResourceOwnershipRegistry
from deployfind.resolver import DeployJarClassFinder
from deployfind.reverse_index import ReverseBinaryDependencyMap
from deployfind.sync_counter import SyncCounter
from deployfind.targets import ArtifactHandle, ResourceConsumer

logger = logging.getLogger("deployfind.session")

FallbackFactory = Callable[[ResourceConsumer], FallbackResolver]


def _no_output_roots(consumer: ResourceConsumer) -> FallbackResolver:
    return OutputDirectoryClassFinder()


class FinderSession:
    """Per-workspace class resolution with sync-generation caching."""

    def __init__(
        self,
        counter: SyncCounter | None = None,
        settings: Settings | None = None,
        registry: ResourceOwnershipRegistry | None = None,
        decoder: LocationDecoder | None = None,
        fallback_factory: FallbackFactory | None = None,
        reader: ArchiveReader | None = None,
    ) -> None:
        self._counter = counter if counter is not None else SyncCounter()
        self._settings = settings if settings is not None else get_settings()
        self._registry = registry if registry is not None else ResourceOwnershipRegistry()
        self._decoder = (
            decoder if decoder is not None
            else ArtifactLocationDecoder(self._settings.output_base or ".")
        )
        self._reader = reader if reader is not None else ZipArchiveReader()
        self._fallback_factory = fallback_factory or _no_output_roots

        self._data_lock = threading.Lock()
        self._data: WorkspaceSnapshot | None = None
        self._rdeps = ReverseBinaryDependencyMap(self._counter, self.snapshot)

        self._finders_lock = threading.Lock()
        self._finders: dict[str, DeployJarClassFinder | FallbackResolver] = {}

    @property
    def counter(self) -> SyncCounter:
        return self._counter

    @property
    def registry(self) -> ResourceOwnershipRegistry:
        return self._registry

    @property
    def workspace(self) -> WorkspaceSnapshot | None:
        with self._data_lock:
            return self._data

    @property
    def reverse_dependencies(self) -> ReverseBinaryDependencyMap:
        return self._rdeps

    def snapshot(self) -> tuple[int, WorkspaceSnapshot | None]:
        """The live generation and the workspace data it describes."""
        with self._data_lock:
            return self._counter.current_generation(), self._data

    def on_sync_completed(self, data: WorkspaceSnapshot | None = None) -> None:
        """Record a completed refresh. Advances the generation even without new data."""
        with self._data_lock:
            if data is not None:
                self._data = data
            self._counter.on_refresh_completed()
        if data is not None:
            self._reconcile(data)

    def resolve_class(self, consumer: ResourceConsumer, qualified_name: str) -> ArtifactHandle | None:
        return self.finder_for(consumer).resolve(qualified_name)

    def finder_for(self, consumer: ResourceConsumer) -> DeployJarClassFinder | FallbackResolver:
        with self._finders_lock:
            finder = self._finders.get(consumer.name)
            if finder is None:
                finder = self._create_finder(consumer)
                self._finders[consumer.name] = finder
            elif isinstance(finder, DeployJarClassFinder) and finder.consumer != consumer:
                finder.replace_consumer(consumer)
            return finder

    def dispose(self) -> None:
        self._rdeps.dispose()
        with self._finders_lock:
            self._finders.clear()

    def _create_finder(self, consumer: ResourceConsumer) -> DeployJarClassFinder | FallbackResolver:
        fallback = self._fallback_factory(consumer)
        if not is_enabled(self._settings):
            return fallback
        return DeployJarClassFinder(
            consumer,
            self._counter,
            self._rdeps,
            lambda: self.workspace,
            decoder=self._decoder,
            reader=self._reader,
            fallback=fallback,
            registry=self._registry,
            sort_candidates=self._settings.sort_candidates,
        )

    def _reconcile(self, data: WorkspaceSnapshot) -> None:
        """Drop finders for consumers that vanished, hand survivors their new consumer."""
        current = {consumer.name: consumer for consumer in data.consumers}
        with self._finders_lock:
            dropped = [name for name in self._finders if name not in current]
            for name in dropped:
                del self._finders[name]
            for name, finder in self._finders.items():
                if isinstance(finder, DeployJarClassFinder):
                    finder.replace_consumer(current[name])
        logger.info(
            "Reconciled: %d consumers, %d finders kept, %d dropped",
            len(current), len(self._finders), len(dropped),
        )

    def __repr__(self) -> str:
        return f"FinderSession(generation={self._counter.current_generation()}, finders={len(self._finders)})"
