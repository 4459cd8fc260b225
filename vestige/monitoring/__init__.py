"""
Monitoring module - logging setup for hosts embedding the engine.
"""

from vestige.monitoring.logging import (
    LogLevel,
    JsonFormatter,
    HumanFormatter,
    configure_logging,
    get_logger,
)

__all__ = [
    "LogLevel",
    "JsonFormatter",
    "HumanFormatter",
    "configure_logging",
    "get_logger",
]
