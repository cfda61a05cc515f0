"""Timestamped cache values."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class CacheSource(Enum):
    """Where a value returned by ``TimedCache.get()`` came from."""

    FRESH = "fresh"  # fetched during this call
    CACHED = "cached"  # within the cache duration
    FALLBACK = "fallback"  # refresh failed, served from the fallback window


@dataclass(frozen=True)
class TimestampedValue(Generic[T]):
    value: T
    timestamp: float


@dataclass(frozen=True)
class CacheResult(Generic[T]):
    """A stored value tagged with how it was obtained."""

    value: T
    timestamp: float
    source: CacheSource

    @classmethod
    def tag(cls, entry: TimestampedValue[T], source: CacheSource) -> "CacheResult[T]":
        return cls(value=entry.value, timestamp=entry.timestamp, source=source)

    @property
    def entry(self) -> TimestampedValue[T]:
        return TimestampedValue(value=self.value, timestamp=self.timestamp)
