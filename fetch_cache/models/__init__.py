"""Value and bookkeeping dataclasses shared by the caches."""

from __future__ import annotations

from .poll_stats import PollStats
from .timestamped import CacheResult, CacheSource, TimestampedValue

__all__ = ["CacheResult", "CacheSource", "PollStats", "TimestampedValue"]
