"""Central configuration for fetch_cache.

Defaults for the HTTP helpers and the watch entrypoint, read once from the
environment.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes"}


def _read_float(name: str, default: float) -> float:
    """Parse a float environment variable, falling back on bad input."""
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using %s", name, raw, default)
        return default


def _read_optional_float(name: str) -> float | None:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, ignoring", name, raw)
        return None


def _read_int(name: str, default: int) -> int:
    raw = (os.environ.get(name) or "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        logger.warning("Invalid %s=%r, using %s", name, raw, default)
        return default


@dataclass
class Settings:
    """Configuration settings for fetch_cache.

    All settings are loaded from environment variables with sensible defaults.
    Durations are in seconds.
    """

    URL: str | None
    CACHE_DURATION_S: float
    FALLBACK_DURATION_S: float
    POLL_INTERVAL_S: float
    RETRY_INTERVAL_S: float | None
    MAX_RETRIES: int
    REQUIRE_INIT_SUCCESS: bool
    HTTP_TIMEOUT_S: float


def _read_settings() -> Settings:
    """Read all configuration from environment variables.

    Note:
        Invalid numeric values fall back to the defaults.
        Boolean values accept: 1/true/yes (case-insensitive) as True.
    """
    url = (os.environ.get("FETCH_CACHE_URL") or "").strip() or None
    require_raw = os.environ.get("FETCH_CACHE_REQUIRE_INIT", "true")

    return Settings(
        URL=url,
        CACHE_DURATION_S=_read_float("FETCH_CACHE_DURATION_S", 60.0),
        FALLBACK_DURATION_S=_read_float("FETCH_CACHE_FALLBACK_S", 0.0),
        POLL_INTERVAL_S=_read_float("FETCH_CACHE_POLL_INTERVAL_S", 60.0),
        RETRY_INTERVAL_S=_read_optional_float("FETCH_CACHE_RETRY_INTERVAL_S"),
        MAX_RETRIES=_read_int("FETCH_CACHE_MAX_RETRIES", 5),
        REQUIRE_INIT_SUCCESS=require_raw.strip().lower() in _TRUE_VALUES,
        HTTP_TIMEOUT_S=_read_float("FETCH_CACHE_HTTP_TIMEOUT_S", 10.0),
    )


settings = _read_settings()


def validate_settings(s: Settings | None = None) -> list[str]:
    """Log a warning for each inconsistent setting and return the messages."""
    s = s or settings
    problems: list[str] = []
    if s.POLL_INTERVAL_S <= 0:
        problems.append("FETCH_CACHE_POLL_INTERVAL_S must be positive")
    if s.MAX_RETRIES < 0:
        problems.append("FETCH_CACHE_MAX_RETRIES must not be negative")
    if s.CACHE_DURATION_S < 0:
        problems.append("FETCH_CACHE_DURATION_S must not be negative")
    if 0 < s.FALLBACK_DURATION_S <= s.CACHE_DURATION_S:
        problems.append(
            "FETCH_CACHE_FALLBACK_S is measured from the fetch time; "
            "values not above FETCH_CACHE_DURATION_S never fall back"
        )
    if s.RETRY_INTERVAL_S is not None and s.RETRY_INTERVAL_S > s.POLL_INTERVAL_S:
        problems.append("FETCH_CACHE_RETRY_INTERVAL_S is longer than the poll interval")
    for msg in problems:
        logger.warning(msg)
    return problems
