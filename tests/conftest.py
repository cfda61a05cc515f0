"""Shared test fixtures and fake collaborators."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

import pytest


class FetchFailed(Exception):
    pass


class ScriptedFetch:
    """Async fetch returning ``value``; raises while ``value`` is None."""

    def __init__(self, value: object | None = "original") -> None:
        self.value = value
        self.calls = 0

    async def __call__(self) -> object:
        self.calls += 1
        if self.value is None:
            raise FetchFailed("unavailable")
        return self.value


class DummyClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@dataclass
class ScheduledCall:
    id: int
    callback: Callable[[], Awaitable[None]]
    delay: float


class VirtualScheduler:
    """Scheduler whose time only moves when a test fires the armed callback."""

    def __init__(self) -> None:
        self.current_time = 0.0
        self.current: ScheduledCall | None = None
        self.scheduled: list[ScheduledCall] = []
        self.cancelled: list[int] = []
        self._next_id = 1

    def now(self) -> float:
        return self.current_time

    def schedule(self, callback, delay: float) -> int:
        call = ScheduledCall(id=self._next_id, callback=callback, delay=delay)
        self._next_id += 1
        self.current = call
        self.scheduled.append(call)
        return call.id

    def cancel(self, handle: int) -> None:
        self.cancelled.append(handle)

    async def fire(self) -> None:
        """Advance time by the armed delay and run its callback."""
        assert self.current is not None, "nothing scheduled"
        call = self.current
        self.current_time += call.delay
        await call.callback()


class QueuedFetch:
    """Each call returns the next value once its gate is opened."""

    def __init__(self, *values: object) -> None:
        self._pending = [(value, asyncio.Event()) for value in values]
        self.gates = [gate for _, gate in self._pending]

    async def __call__(self) -> object:
        value, gate = self._pending.pop(0)
        await gate.wait()
        return value


@pytest.fixture
def fetch() -> ScriptedFetch:
    return ScriptedFetch()


@pytest.fixture
def clock() -> DummyClock:
    return DummyClock()


@pytest.fixture
def scheduler() -> VirtualScheduler:
    return VirtualScheduler()
