import logging

from fetch_cache.logger import setup_logging


def _stream_handlers(root: logging.Logger) -> list[logging.Handler]:
    return [h for h in root.handlers if type(h) is logging.StreamHandler]


def test_setup_logging_installs_one_handler(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers = []
    try:
        assert setup_logging() == logging.DEBUG
        setup_logging()

        handlers = _stream_handlers(root)
        assert len(handlers) == 1
        assert handlers[0].formatter._fmt == "%(asctime)s %(levelname)s %(name)s: %(message)s"
        assert root.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)


def test_setup_logging_keeps_existing_handlers():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    existing = logging.NullHandler()
    root.handlers = [existing]
    try:
        setup_logging("warning")
        assert root.handlers == [existing]
        assert root.level == logging.WARNING
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)


def test_setup_logging_unknown_level_defaults_to_info():
    root = logging.getLogger()
    saved_level = root.level
    try:
        assert setup_logging("chatty") == logging.INFO
    finally:
        root.setLevel(saved_level)
