"""resolve_in_background(): run a class lookup on a managed daemon thread.

Archive scans and index builds can be slow on large workspaces. Callers on a
latency-sensitive thread hand the lookup off and either wait on the returned
handle or receive the result through a callback.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from deployfind.session import FinderSession
from deployfind.targets import ArtifactHandle, ResourceConsumer

logger = logging.getLogger("deployfind.background")


class LookupHandle:
    """Disposable handle for one background lookup."""

    __slots__ = ("_disposed", "_done", "_result", "_error")

    def __init__(self) -> None:
        self._disposed = False
        self._done = threading.Event()
        self._result: ArtifactHandle | None = None
        self._error: BaseException | None = None

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def done(self) -> bool:
        return self._done.is_set()

    @property
    def result(self) -> ArtifactHandle | None:
        """The lookup result. Re-raises the lookup's exception, if any."""
        if self._error is not None:
            raise self._error
        return self._result

    def wait(self, timeout: float | None = None) -> bool:
        return self._done.wait(timeout)

    def dispose(self) -> None:
        """Suppress the callback. The lookup itself still runs to completion."""
        self._disposed = True


def resolve_in_background(
    session: FinderSession,
    consumer: ResourceConsumer,
    qualified_name: str,
    callback: Callable[[ArtifactHandle | None], None] | None = None,
) -> LookupHandle:
    """Resolve on a daemon thread. Returns a LookupHandle.

    Usage:
        handle = resolve_in_background(session, consumer, "com.x.Foo", on_found)
        ...
        handle.dispose()  # caller went away, drop the callback
    """
    handle = LookupHandle()

    def _run() -> None:
        try:
            handle._result = session.resolve_class(consumer, qualified_name)
        except Exception as e:
            logger.exception("Background lookup of %s failed", qualified_name)
            handle._error = e
            handle._done.set()
            return
        handle._done.set()
        if callback is not None and not handle._disposed:
            callback(handle._result)

    threading.Thread(target=_run, daemon=True).start()
    return handle
