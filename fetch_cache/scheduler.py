"""Clock and scheduler bindings used by the caches.

`PollingCache` only talks to the `PollScheduler` protocol so tests can drive it
with virtual time. `AsyncioScheduler` is the production binding on top of the
running event loop.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Protocol

logger = logging.getLogger(__name__)

PollCallback = Callable[[], Awaitable[None]]


class PollScheduler(Protocol):
    """Manages time and runs callbacks after a delay.

    ``now()`` and ``delay`` must use the same unit as the intervals given to
    the cache.
    """

    def now(self) -> float: ...

    def schedule(self, callback: PollCallback, delay: float) -> Any: ...

    def cancel(self, handle: Any) -> None: ...


def monotonic_clock() -> float:
    """Default clock for `TimedCache`, in seconds."""
    return time.monotonic()


class AsyncioScheduler:
    """`PollScheduler` backed by ``loop.call_later``.

    Fired callbacks run as tasks. The scheduler keeps a reference to each task
    until it finishes and logs anything that escapes it.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._timers: set[asyncio.TimerHandle] = set()
        self._tasks: set[asyncio.Task] = set()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    @property
    def pending(self) -> int:
        """Number of armed timers that have not fired or been cancelled."""
        return len(self._timers)

    def now(self) -> float:
        return self.loop.time()

    def schedule(self, callback: PollCallback, delay: float) -> asyncio.TimerHandle:
        handle: asyncio.TimerHandle | None = None

        def _fire() -> None:
            self._timers.discard(handle)
            task = self.loop.create_task(callback())
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

        handle = self.loop.call_later(max(0.0, delay), _fire)
        self._timers.add(handle)
        return handle

    def cancel(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()
        self._timers.discard(handle)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Scheduled callback raised", exc_info=(type(exc), exc, exc.__traceback__)
            )

    async def aclose(self) -> None:
        """Cancel armed timers and wait for callbacks already running."""
        for handle in list(self._timers):
            handle.cancel()
        self._timers.clear()
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


__all__ = ["AsyncioScheduler", "PollCallback", "PollScheduler", "monotonic_clock"]
