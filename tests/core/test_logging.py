"""Tests for descriptor_spine.core.logging."""

import io
import json

import structlog
from structlog.testing import capture_logs

from descriptor_spine.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)


def _configure(level: str = "INFO", json_format: bool = True) -> io.StringIO:
    stream = io.StringIO()
    configure_logging(level=level, json_format=json_format, stream=stream, cache_logger=False)
    return stream


def _lines(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


class TestConfigureLogging:
    def test_json_lines_are_ecs_compatible(self):
        stream = _configure()
        get_logger("tests.logging").info("descriptor.matched", bundle="r41.tar.gz")

        [record] = _lines(stream)
        assert record["event"] == "descriptor.matched"
        assert record["bundle"] == "r41.tar.gz"
        assert record["log.level"] == "info"
        assert record["service.name"] == "descriptor-spine"
        assert record["logger_name"] == "tests.logging"
        assert "@timestamp" in record
        assert "timestamp" not in record

    def test_level_filters(self):
        stream = _configure(level="WARNING")
        logger = get_logger("tests.logging")
        logger.info("hidden")
        logger.warning("shown")

        assert [r["event"] for r in _lines(stream)] == ["shown"]

    def test_console_format(self):
        stream = _configure(json_format=False)
        get_logger("tests.logging").info("descriptor.using_default", bundle="default.tar.gz")

        output = stream.getvalue()
        assert "descriptor.using_default" in output
        assert "default.tar.gz" in output

    def test_custom_service_name(self):
        stream = io.StringIO()
        configure_logging(service="job-dispatcher", stream=stream, json_format=True, cache_logger=False)
        get_logger().info("ping")

        assert _lines(stream)[0]["service.name"] == "job-dispatcher"
        configure_logging(stream=io.StringIO(), cache_logger=False)


class TestGetLogger:
    def test_module_level_logger_follows_later_configuration(self):
        logger = get_logger("descriptor_spine.archive.reader")

        with capture_logs() as logs:
            logger.info("archive.opened", entries=2)

        assert logs == [
            {
                "event": "archive.opened",
                "entries": 2,
                "log_level": "info",
                "logger_name": "descriptor_spine.archive.reader",
            }
        ]

    def test_unnamed_logger(self):
        with capture_logs() as logs:
            get_logger().info("ping")

        assert logs == [{"event": "ping", "log_level": "info"}]


class TestContext:
    def test_log_context_binds_and_unbinds(self):
        stream = _configure()
        logger = get_logger("tests.logging")

        with LogContext(analysis_id="42"):
            logger.info("inside")
        logger.info("outside")

        inside, outside = _lines(stream)
        assert inside["analysis_id"] == "42"
        assert "analysis_id" not in outside

    def test_bind_and_clear(self):
        bind_context(analysis_id="7", host="worker-1")
        unbind_context("host")
        assert structlog.contextvars.get_contextvars() == {"analysis_id": "7"}

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}
