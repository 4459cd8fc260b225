"""
Structured logging for Vestige.

Engine modules log through ``logging.getLogger(__name__)``; this module only
decides where those records go and how they look. Records carry any
``extra={...}`` fields through to the JSON output.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from enum import Enum
from typing import Any, TextIO

ROOT_LOGGER = "vestige"

# Attributes every logging.LogRecord has; anything else came from ``extra``.
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class LogLevel(Enum):
    """Log levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def numeric(self) -> int:
        """Get numeric log level."""
        return {
            "debug": logging.DEBUG,
            "info": logging.INFO,
            "warning": logging.WARNING,
            "error": logging.ERROR,
            "critical": logging.CRITICAL,
        }[self.value]


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    Example output:
        {"level": "info", "logger": "vestige.engine.mutator",
         "message": "Connected: a -> b (in-signal-main)",
         "timestamp": 1718000000.0, "thread": "MainThread"}
    """

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "timestamp": record.created,
            "thread": record.threadName,
        }
        data.update(_extra_fields(record))

        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)

        return json.dumps(data, default=str)


class HumanFormatter(logging.Formatter):
    """``[2024-06-10 12:00:00] [INFO] [vestige.engine.mutator] message (k=v)``"""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(record.created))
        parts = [
            f"[{timestamp}]",
            f"[{record.levelname}]",
            f"[{record.name}]",
            record.getMessage(),
        ]

        extra = _extra_fields(record)
        if extra:
            parts.append("(" + " ".join(f"{k}={v}" for k, v in extra.items()) + ")")

        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    output: TextIO | None = None,
    json_format: bool = True,
) -> logging.Logger:
    """Configure the ``vestige`` logger.

    Replaces any handler a previous call installed, so calling this twice
    never duplicates output.

    Args:
        level: Log level.
        output: Output stream (default: stderr).
        json_format: Use JSON format.

    Returns:
        The configured ``vestige`` logger.
    """
    if isinstance(level, str):
        level = LogLevel(level.lower())

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_vestige_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(output or sys.stderr)
    handler.setFormatter(JsonFormatter() if json_format else HumanFormatter())
    handler._vestige_handler = True  # type: ignore[attr-defined]

    logger.addHandler(handler)
    logger.setLevel(level.numeric)
    logger.propagate = False
    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Get a logger under the ``vestige`` namespace."""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
