# src/supervision_tracker/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

APP_LOGGER = "supervision_tracker"

# Chatty HTTP client loggers; their DEBUG/INFO lines are per-request.
_HTTP_LOGGERS = ("httpx", "httpcore")


def _belongs_to(name: str, parent: str) -> bool:
    return name == parent or name.startswith(parent + ".")


class _ConsoleNoiseFilter(logging.Filter):
    """Console shows our own records; anything else only at ERROR and above."""

    def filter(self, record: logging.LogRecord) -> bool:
        if _belongs_to(record.name, APP_LOGGER):
            return True
        return record.levelno >= logging.ERROR


class _HttpChatterFilter(logging.Filter):
    """The log file keeps HTTP client records only from WARNING up."""

    def filter(self, record: logging.LogRecord) -> bool:
        if any(_belongs_to(record.name, n) for n in _HTTP_LOGGERS):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(
    *,
    log_dir: str | Path = ".local/supervision",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install a filtered stderr handler and a full file log under `log_dir`.

    Replaces whatever handlers the root logger already has, so calling it
    again (tests, reloads) does not duplicate output. Returns the log file path.
    """
    log_file = Path(log_dir) / "supervision.log"
    log_file.parent.mkdir(parents=True, exist_ok=True)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.addFilter(_ConsoleNoiseFilter())

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.addFilter(_HttpChatterFilter())

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    root.setLevel(logging.DEBUG)
    for handler in (console, file_handler):
        handler.setFormatter(fmt)
        root.addHandler(handler)

    # warnings.warn(...) arrives as 'py.warnings' and goes through the same filters
    logging.captureWarnings(True)
    return log_file
