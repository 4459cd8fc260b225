"""Tests for logging configuration."""

import io
import json
import logging

import pytest

from vestige.monitoring import HumanFormatter, JsonFormatter, LogLevel, configure_logging, get_logger


@pytest.fixture
def vestige_logger():
    logger = logging.getLogger("vestige")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def make_record(msg="hello", **extra):
    record = logging.LogRecord("vestige.engine.tracer", logging.INFO, __file__, 1, msg, None, None)
    record.__dict__.update(extra)
    return record


class TestFormatters:
    """Tests for the record formatters."""

    def test_json_fields(self):
        data = json.loads(JsonFormatter().format(make_record(node="lfo-1")))

        assert data["level"] == "info"
        assert data["logger"] == "vestige.engine.tracer"
        assert data["message"] == "hello"
        assert data["node"] == "lfo-1"
        assert "timestamp" in data

    def test_human_format(self):
        line = HumanFormatter().format(make_record(node="lfo-1"))
        assert "[INFO]" in line
        assert "[vestige.engine.tracer] hello" in line
        assert "(node=lfo-1)" in line


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_output(self, vestige_logger):
        stream = io.StringIO()
        configure_logging(LogLevel.DEBUG, stream)

        get_logger("engine.mutator").debug("Connected: a -> b")

        data = json.loads(stream.getvalue().strip())
        assert data["logger"] == "vestige.engine.mutator"
        assert data["message"] == "Connected: a -> b"

    def test_level_filters(self, vestige_logger):
        stream = io.StringIO()
        configure_logging("warning", stream, json_format=False)

        get_logger("engine").info("quiet")
        get_logger("engine").warning("loud")

        assert "quiet" not in stream.getvalue()
        assert "loud" in stream.getvalue()

    def test_reconfigure_does_not_duplicate(self, vestige_logger):
        stream = io.StringIO()
        configure_logging(LogLevel.INFO, stream)
        configure_logging(LogLevel.INFO, stream)

        get_logger().info("once")

        assert len(stream.getvalue().strip().splitlines()) == 1

    def test_get_logger_prefix(self):
        assert get_logger("nodes").name == "vestige.nodes"
        assert get_logger("vestige.nodes").name == "vestige.nodes"
        assert get_logger().name == "vestige"
