from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import Any, Mapping

LOGGER_NAME = "relaunch"


class TimestampedFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        timestamp = time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
        return f"{timestamp}.{int(record.msecs):03d}Z - {record.getMessage()}"


class LogFileHandler(logging.FileHandler):
    """Append-only log file that never takes the run down with it."""

    def __init__(self, path: str | Path):
        super().__init__(path, mode="a", encoding="utf-8", delay=False)

    def handleError(self, record: logging.LogRecord) -> None:
        exc = sys.exc_info()[1]
        try:
            sys.stderr.write(f"Error writing to log file {self.baseFilename}: {exc}\n")
        except OSError:
            pass


def format_fields(payload: Mapping[str, Any]) -> str:
    """Render ``key=value`` pairs for a single log line, skipping unset values."""
    return " ".join(f"{key}={value}" for key, value in payload.items() if value is not None)


def configure_logging(log_path: str | Path | None = None) -> logging.Logger:
    """Route relaunch events to the console and, optionally, a log file.

    Every supervision event is part of the activity record, so the logger is
    not level-filtered. The log file is opened right away in append mode and
    held until :func:`shutdown_logging`. Raises ``OSError`` if it cannot be
    opened.
    """
    shutdown_logging()
    logger = logging.getLogger(LOGGER_NAME)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    handlers: list[logging.Handler] = [console_handler]
    if log_path is not None:
        file_handler = LogFileHandler(Path(log_path).expanduser())
        file_handler.setFormatter(TimestampedFormatter())
        handlers.append(file_handler)
    logger.handlers = handlers
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    return logger


def shutdown_logging() -> None:
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
