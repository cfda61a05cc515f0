"""Exceptions raised by the fetch caches."""

from __future__ import annotations


class FetchCacheError(Exception):
    """Base class for fetch_cache errors."""


class FetchError(FetchCacheError):
    """The fetch failed and no cached or fallback value could be served.

    The original exception is available as ``cause`` (and ``__cause__``).
    """

    def __init__(self, message: str, cause: BaseException) -> None:
        super().__init__(message)
        self.cause = cause


class NotInitializedError(FetchCacheError):
    def __init__(self) -> None:
        super().__init__("Cannot retrieve value. Call init() first.")


class NoSuccessfulFetchError(FetchCacheError):
    def __init__(self) -> None:
        super().__init__("Cannot retrieve polled value. No fetch has succeeded.")


__all__ = [
    "FetchCacheError",
    "FetchError",
    "NotInitializedError",
    "NoSuccessfulFetchError",
]
