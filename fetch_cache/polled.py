"""Periodically fetch a value so it is always available in advance."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Generic, TypeVar

from .errors import NoSuccessfulFetchError, NotInitializedError
from .models import PollStats, TimestampedValue
from .scheduler import PollScheduler

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PollingCache(Generic[T]):
    """Keep a value fresh by fetching it on a schedule.

    `init()` fetches once and arms the first poll. Each scheduled poll arms the
    next one: ``poll_interval`` after a success, ``retry_interval`` after a
    failure while fewer than ``max_retries`` consecutive failures have used it,
    and ``poll_interval`` again after that. Failed scheduled polls never raise;
    they are reported through ``on_error``.

    Args:
        fetch: Coroutine function doing the expensive fetch.
        scheduler: Supplies the time and runs callbacks after a delay.
        poll_interval: Delay between polls.
        retry_interval: Delay after a failed poll. None keeps ``poll_interval``.
        max_retries: How many consecutive failures may use ``retry_interval``.
        on_error: Called with the exception of every failed poll.
        require_init_success: Whether ``init()`` raises if its fetch fails.
        name: Label used in log messages.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[T]],
        scheduler: PollScheduler,
        poll_interval: float,
        *,
        retry_interval: float | None = None,
        max_retries: int = 5,
        on_error: Callable[[Exception], Any] | None = None,
        require_init_success: bool = True,
        name: str = "value",
    ) -> None:
        if poll_interval < 0:
            raise ValueError("poll_interval must be >= 0")
        if retry_interval is not None and retry_interval < 0:
            raise ValueError("retry_interval must be >= 0")
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.poll_interval = poll_interval
        self.retry_interval = retry_interval
        self.max_retries = max_retries
        self.require_init_success = require_init_success
        self.name = name

        self._fetch = fetch
        self._scheduler = scheduler
        self._on_error = on_error

        self._initialized = False
        self._data: TimestampedValue[T] | None = None
        self._running_schedule: Any | None = None
        # Bumped by init() and dispose(); polls from an older generation are
        # discarded when their fetch completes.
        self._generation = 0
        self._stats = PollStats()

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def consecutive_failures(self) -> int:
        return self._stats.consecutive_failures

    @property
    def stats(self) -> PollStats:
        return self._stats

    async def init(self) -> None:
        """Fetch the value and start polling.

        Raises whatever the fetch raises when no value is stored yet and
        ``require_init_success`` is true. In that case polling is not started.
        """
        if self._initialized:
            self.dispose()
        self._generation += 1
        generation = self._generation

        if self._data is None and self.require_init_success:
            value = await self._fetch_counted()
            if generation != self._generation:
                self._discard()
                return
            self._store(value)
            self._stats.consecutive_failures = 0
            self._schedule_poll(self.poll_interval)
        else:
            await self._poll(generation)
            if generation != self._generation:
                return

        self._initialized = True
        logger.info(
            "Polling %s every %ss (retry=%s, max_retries=%d)",
            self.name,
            self.poll_interval,
            self.retry_interval,
            self.max_retries,
        )

    def dispose(self) -> None:
        """Stop polling. Polling can be started again by calling `init()`."""
        if self._running_schedule is not None:
            self._scheduler.cancel(self._running_schedule)
            self._running_schedule = None
        self._generation += 1
        self._initialized = False

    def get(self) -> TimestampedValue[T] | None:
        """Return the value, or None if no fetch has succeeded yet.

        None is only possible when ``require_init_success`` is false; use
        `require()` to guarantee a value.
        """
        self._assert_initialized()
        return self._data

    def require(self) -> TimestampedValue[T]:
        self._assert_initialized()
        if self._data is None:
            raise NoSuccessfulFetchError()
        return self._data

    async def fetch(self) -> TimestampedValue[T]:
        """Fetch now, outside the schedule, and push the next poll back.

        The fetch function's exception propagates unchanged.
        """
        self._assert_initialized()
        generation = self._generation
        value = await self._fetch_counted()
        entry = self._store(value)
        self._stats.consecutive_failures = 0
        if generation == self._generation:
            self._schedule_poll(self.poll_interval)
        return entry

    async def _poll(self, generation: int) -> None:
        if generation != self._generation:
            return
        # The timer that called us has already fired.
        self._running_schedule = None

        try:
            value = await self._fetch_counted()
        except Exception as exc:
            if generation != self._generation:
                self._discard()
                return
            logger.warning(
                "Polling %s failed (%d consecutive): %s",
                self.name,
                self._stats.consecutive_failures + 1,
                exc,
            )
            self._report_error(exc)
            self._schedule_poll(self._next_failure_interval())
            self._stats.consecutive_failures += 1
            return

        if generation != self._generation:
            self._discard()
            return
        self._store(value)
        self._stats.consecutive_failures = 0
        self._schedule_poll(self.poll_interval)

    def _next_failure_interval(self) -> float:
        failures = self._stats.consecutive_failures
        if self.retry_interval is not None and failures < self.max_retries:
            return self.retry_interval
        return self.poll_interval

    async def _fetch_counted(self) -> T:
        try:
            value = await self._fetch()
        except Exception as exc:
            self._stats.record_failure(exc)
            raise
        self._stats.record_success(self._scheduler.now())
        return value

    def _store(self, value: T) -> TimestampedValue[T]:
        self._data = TimestampedValue(value=value, timestamp=self._scheduler.now())
        return self._data

    def _discard(self) -> None:
        self._stats.discarded += 1
        logger.debug("Discarding %s fetch that completed after dispose()", self.name)

    def _report_error(self, exc: Exception) -> None:
        if self._on_error is None:
            return
        try:
            self._on_error(exc)
        except Exception:
            logger.exception("on_error callback failed for %s", self.name)

    def _schedule_poll(self, interval: float) -> None:
        if self._running_schedule is not None:
            self._scheduler.cancel(self._running_schedule)
        generation = self._generation

        async def _callback() -> None:
            await self._poll(generation)

        self._running_schedule = self._scheduler.schedule(_callback, interval)
        logger.debug("Next poll of %s in %ss", self.name, interval)

    def _assert_initialized(self) -> None:
        if not self._initialized:
            raise NotInitializedError()


__all__ = ["PollingCache"]
