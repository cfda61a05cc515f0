"""Caching and polling wrappers around async fetch functions."""

from __future__ import annotations

from .cached import TimedCache
from .errors import (
    FetchCacheError,
    FetchError,
    NoSuccessfulFetchError,
    NotInitializedError,
)
from .models import CacheResult, CacheSource, PollStats, TimestampedValue
from .polled import PollingCache
from .scheduler import AsyncioScheduler, PollScheduler, monotonic_clock

__version__ = "0.1.0"

__all__ = [
    "AsyncioScheduler",
    "CacheResult",
    "CacheSource",
    "FetchCacheError",
    "FetchError",
    "NoSuccessfulFetchError",
    "NotInitializedError",
    "PollScheduler",
    "PollStats",
    "PollingCache",
    "TimedCache",
    "TimestampedValue",
    "monotonic_clock",
]
