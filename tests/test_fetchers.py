import httpx
import pytest

from conftest import DummyClock, VirtualScheduler
from fetch_cache import CacheSource, FetchError, config
from fetch_cache.fetchers import cached_json, json_fetcher, polled_json


def transport_for(responses: list[httpx.Response]) -> httpx.MockTransport:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return responses.pop(0)

    transport = httpx.MockTransport(handler)
    transport.seen = seen
    return transport


@pytest.mark.asyncio
async def test_json_fetcher_decodes_body() -> None:
    transport = transport_for([httpx.Response(200, json={"temp": 21})])
    fetch = json_fetcher(
        "https://example.test/weather", headers={"X-Key": "abc"}, transport=transport
    )

    assert await fetch() == {"temp": 21}
    request = transport.seen[0]
    assert request.method == "GET"
    assert request.headers["X-Key"] == "abc"


@pytest.mark.asyncio
async def test_json_fetcher_raises_on_error_status() -> None:
    transport = transport_for([httpx.Response(503)])
    fetch = json_fetcher("https://example.test/weather", transport=transport)

    with pytest.raises(httpx.HTTPStatusError):
        await fetch()


@pytest.mark.asyncio
async def test_cached_json_falls_back_on_http_error() -> None:
    transport = transport_for(
        [httpx.Response(200, json=[1, 2]), httpx.Response(500), httpx.Response(500)]
    )
    clock = DummyClock()
    cached = cached_json(
        "https://example.test/list",
        cache_duration=10,
        fallback_duration=30,
        clock=clock,
        transport=transport,
    )

    assert (await cached.get()).source is CacheSource.FRESH
    clock.now = 15
    result = await cached.get()
    assert result.source is CacheSource.FALLBACK
    assert result.value == [1, 2]

    clock.now = 30
    with pytest.raises(FetchError) as excinfo:
        await cached.get()
    assert isinstance(excinfo.value.cause, httpx.HTTPStatusError)


@pytest.mark.asyncio
async def test_polled_json_uses_settings_defaults(monkeypatch) -> None:
    settings = config._read_settings()
    settings.POLL_INTERVAL_S = 30.0
    settings.RETRY_INTERVAL_S = 5.0
    settings.MAX_RETRIES = 2
    monkeypatch.setattr(config, "settings", settings)

    transport = transport_for([httpx.Response(200, json={"n": 1}), httpx.Response(502)])
    scheduler = VirtualScheduler()
    polled = polled_json("https://example.test/n", scheduler, transport=transport)

    assert polled.poll_interval == 30.0
    assert polled.max_retries == 2
    await polled.init()
    assert polled.require().value == {"n": 1}
    assert scheduler.current.delay == 30.0

    await scheduler.fire()
    assert scheduler.current.delay == 5.0
    assert polled.require().value == {"n": 1}


def test_polled_json_arguments_override_settings() -> None:
    polled = polled_json(
        "https://example.test/n",
        VirtualScheduler(),
        poll_interval=1,
        retry_interval=0.5,
        max_retries=0,
        require_init_success=False,
    )
    assert polled.poll_interval == 1
    assert polled.retry_interval == 0.5
    assert polled.max_retries == 0
    assert polled.require_init_success is False
    assert polled.name == "https://example.test/n"
