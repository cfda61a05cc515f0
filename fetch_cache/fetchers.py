"""HTTP JSON fetchers and ready-made caches built on them."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Mapping

import httpx

from . import config
from .cached import TimedCache
from .polled import PollingCache
from .scheduler import AsyncioScheduler, PollScheduler, monotonic_clock

logger = logging.getLogger(__name__)


def json_fetcher(
    url: str,
    *,
    timeout: float | None = None,
    headers: Mapping[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Callable[[], Awaitable[Any]]:
    """Return a coroutine function that GETs ``url`` and decodes the JSON body.

    Non-2xx responses raise ``httpx.HTTPStatusError``; network failures raise
    the matching ``httpx`` error. Both reach the cache untouched.
    """
    if timeout is None:
        timeout = config.settings.HTTP_TIMEOUT_S
    request_headers = dict(headers or {})

    async def _fetch() -> Any:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.get(url, headers=request_headers)
            response.raise_for_status()
            logger.debug("GET %s -> %s", url, response.status_code)
            return response.json()

    return _fetch


def cached_json(
    url: str,
    *,
    cache_duration: float | None = None,
    fallback_duration: float | None = None,
    clock: Callable[[], float] = monotonic_clock,
    **fetch_kwargs: Any,
) -> TimedCache[Any]:
    """Build a `TimedCache` over a JSON endpoint (durations in seconds)."""
    s = config.settings
    return TimedCache(
        json_fetcher(url, **fetch_kwargs),
        clock,
        s.CACHE_DURATION_S if cache_duration is None else cache_duration,
        s.FALLBACK_DURATION_S if fallback_duration is None else fallback_duration,
        name=url,
    )


def polled_json(
    url: str,
    scheduler: PollScheduler | None = None,
    *,
    poll_interval: float | None = None,
    retry_interval: float | None = None,
    max_retries: int | None = None,
    require_init_success: bool | None = None,
    on_error: Callable[[Exception], Any] | None = None,
    **fetch_kwargs: Any,
) -> PollingCache[Any]:
    """Build a `PollingCache` over a JSON endpoint.

    Unset arguments come from `config.settings`. Without a scheduler an
    `AsyncioScheduler` is used, which binds to the running loop on first use.
    """
    s = config.settings
    return PollingCache(
        json_fetcher(url, **fetch_kwargs),
        scheduler or AsyncioScheduler(),
        s.POLL_INTERVAL_S if poll_interval is None else poll_interval,
        retry_interval=s.RETRY_INTERVAL_S if retry_interval is None else retry_interval,
        max_retries=s.MAX_RETRIES if max_retries is None else max_retries,
        on_error=on_error,
        require_init_success=(
            s.REQUIRE_INIT_SUCCESS if require_init_success is None else require_init_success
        ),
        name=url,
    )


__all__ = ["cached_json", "json_fetcher", "polled_json"]
