"""
Single-flight cache for remote resource handles.

Remote backends need a container or bucket handle before they can upload.
Acquiring one costs an authenticated lookup (and sometimes a create), so
concurrent callers share one in-flight acquisition per key and every later
caller reuses the result.
"""

import asyncio
import enum
import logging
from typing import Awaitable, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _LeaderCancelled(Exception):
    """The caller running an acquisition was cancelled before it finished."""


class EntryState(str, enum.Enum):
    ABSENT = "absent"
    CONNECTING = "connecting"
    READY = "ready"


class ResourceCache(Generic[T]):
    """
    Maps a key (container/bucket name) to a lazily acquired handle.

    The first caller for a key runs the acquire coroutine; callers arriving
    while it is in flight await the same future. A ready handle is kept for
    the lifetime of the cache. A failed acquisition is raised to every
    waiter of that attempt and the entry goes back to absent.
    """

    def __init__(self) -> None:
        self._ready: dict[str, T] = {}
        self._pending: dict[str, asyncio.Future] = {}

    def state(self, key: str) -> EntryState:
        if key in self._ready:
            return EntryState.READY
        if key in self._pending:
            return EntryState.CONNECTING
        return EntryState.ABSENT

    def peek(self, key: str) -> T | None:
        return self._ready.get(key)

    async def get(self, key: str, acquire: Callable[[], Awaitable[T]]) -> T:
        """
        Return the handle for key, acquiring it at most once at a time.

        Args:
            key: Resource identity
            acquire: Coroutine factory performing the lookup-or-create

        Raises:
            Whatever acquire raised, to every caller waiting on it. A
            cancelled acquisition is not an error for waiters: they retry.
        """
        while key not in self._ready:
            pending = self._pending.get(key)
            if pending is None:
                return await self._acquire(key, acquire)
            try:
                # shield: a cancelled waiter must not cancel the shared attempt
                return await asyncio.shield(pending)
            except _LeaderCancelled:
                # the leader went away; one of the waiters takes over
                continue

        return self._ready[key]

    async def _acquire(self, key: str, acquire: Callable[[], Awaitable[T]]) -> T:
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._pending[key] = future
        try:
            handle = await acquire()
        except asyncio.CancelledError:
            del self._pending[key]
            future.set_exception(_LeaderCancelled(key))
            future.exception()
            raise
        except Exception as e:
            del self._pending[key]
            future.set_exception(e)
            # mark retrieved so an attempt nobody else awaited is not reported
            future.exception()
            raise

        self._ready[key] = handle
        del self._pending[key]
        future.set_result(handle)
        logger.debug(f"Resource {key} ready")
        return handle
