"""Entrypoint that polls ``FETCH_CACHE_URL`` and logs each new value.

Run with ``python -m fetch_cache`` or the ``fetch-cache-watch`` script.
"""

from __future__ import annotations

import asyncio
import json
import logging

from . import config
from .fetchers import polled_json
from .logger import setup_logging
from .polled import PollingCache
from .scheduler import AsyncioScheduler

logger = logging.getLogger(__name__)

_CHECK_INTERVAL_S = 1.0
_PREVIEW_CHARS = 500


def _preview(value: object) -> str:
    try:
        text = json.dumps(value, sort_keys=True)
    except (TypeError, ValueError):
        text = repr(value)
    if len(text) > _PREVIEW_CHARS:
        return text[:_PREVIEW_CHARS] + "..."
    return text


async def watch(cache: PollingCache, check_interval_s: float = _CHECK_INTERVAL_S) -> None:
    """Log the cached value whenever a newer one lands. Runs until cancelled."""
    last_ts: float | None = None
    while True:
        entry = cache.get()
        if entry is not None and entry.timestamp != last_ts:
            last_ts = entry.timestamp
            logger.info("%s @ %.1f: %s", cache.name, entry.timestamp, _preview(entry.value))
        await asyncio.sleep(check_interval_s)


async def _run_async(url: str) -> None:
    scheduler = AsyncioScheduler()
    cache = polled_json(url, scheduler)
    await cache.init()
    try:
        await watch(cache)
    finally:
        cache.dispose()
        await scheduler.aclose()


def run() -> int:
    setup_logging()
    config.validate_settings()
    url = config.settings.URL
    if not url:
        logger.error("FETCH_CACHE_URL environment variable is not set")
        return 2

    logger.info("Starting fetch_cache watch on %s", url)
    try:
        asyncio.run(_run_async(url))
    except KeyboardInterrupt:
        logger.info("Stopped")
    except Exception:
        logger.exception("Watch of %s failed", url)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
