"""Polling counters dataclass."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PollStats:
    attempts: int = 0
    successes: int = 0
    failures: int = 0
    # failed polls since the last success; picks the retry cadence
    consecutive_failures: int = 0
    discarded: int = 0
    last_error: str | None = None
    last_success_ts: float | None = None

    def record_success(self, timestamp: float) -> None:
        self.attempts += 1
        self.successes += 1
        self.last_success_ts = timestamp

    def record_failure(self, exc: BaseException) -> None:
        self.attempts += 1
        self.failures += 1
        self.last_error = str(exc) or type(exc).__name__
