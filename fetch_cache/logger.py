"""Logging helpers for fetch_cache.

Library modules only create loggers; applications (and the watch entrypoint)
call `setup_logging()` once.
"""
from __future__ import annotations

import logging
import os

_NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(level_name: str | None = None) -> int:
    """Attach a stream handler to the root logger and return the level used.

    The level comes from ``level_name`` or ``LOG_LEVEL`` (default INFO).
    An existing root handler is left in place.
    """
    level_name = (level_name or os.environ.get("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root.addHandler(handler)
    root.setLevel(level)

    # one line per HTTP request is too chatty next to poll logs
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    return level


__all__ = ["setup_logging"]
