"""Time-bounded cache around a single async fetch.

A fetched value is served as ``cached`` for ``cache_duration``. After that the
next ``get()`` refreshes it; if the refresh fails, the old value may still be
served as ``fallback`` while it is younger than ``fallback_duration``. Both
windows are measured from the timestamp of the last successful fetch, so a run
of failed refreshes never extends how stale a served value can be.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Generic, TypeVar

from .errors import FetchError
from .models import CacheResult, CacheSource, TimestampedValue

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TimedCache(Generic[T]):
    """Cache a fetched value for a given duration to avoid repeated fetches.

    Args:
        fetch: Coroutine function doing the expensive fetch.
        clock: Returns the current timestamp. Any unit works, as long as the
            durations use the same one.
        cache_duration: How long a value is served before fetching again.
        fallback_duration: How long (from the original fetch) an expired value
            may still be served when a refresh fails. 0 disables fallback.
        name: Label used in log messages.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[T]],
        clock: Callable[[], float],
        cache_duration: float,
        fallback_duration: float = 0.0,
        *,
        name: str = "value",
    ) -> None:
        if cache_duration < 0:
            raise ValueError("cache_duration must be >= 0")
        if fallback_duration < 0:
            raise ValueError("fallback_duration must be >= 0")
        self._fetch = fetch
        self._clock = clock
        self.cache_duration = cache_duration
        self.fallback_duration = fallback_duration
        self.name = name
        self._data: TimestampedValue[T] | None = None

    async def get(self) -> CacheResult[T]:
        """Return the value, fetching it if the cache has expired.

        Raises:
            FetchError: the fetch failed and no fallback value is available.
        """
        cached = self._get_cached(self.cache_duration)
        if cached is not None:
            return CacheResult.tag(cached, CacheSource.CACHED)

        try:
            fresh = await self.fetch()
        except Exception as exc:
            fallback = self._get_cached(self.fallback_duration)
            if fallback is not None:
                logger.warning("Using cached %s after fetch error: %s", self.name, exc)
                return CacheResult.tag(fallback, CacheSource.FALLBACK)
            raise FetchError(f"Failed to fetch {self.name}: {exc}", exc) from exc
        return CacheResult.tag(fresh, CacheSource.FRESH)

    async def fetch(self) -> TimestampedValue[T]:
        """Ignore the cache and fetch the value; the result is cached."""
        value = await self._fetch()
        self._data = TimestampedValue(value=value, timestamp=self._clock())
        logger.debug("Fetched %s at %s", self.name, self._data.timestamp)
        return self._data

    async def clear(self) -> None:
        """Drop the cached value so the next access fetches regardless of age."""
        self._data = None

    def _get_cached(self, max_age: float) -> TimestampedValue[T] | None:
        if self._data is None:
            return None
        expiry = self._data.timestamp + max_age
        return self._data if self._clock() < expiry else None


__all__ = ["TimedCache"]
