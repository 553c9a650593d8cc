"""Tests for structured logging."""

import json
import logging
import sys

from saboriman.infrastructure.observability.logging import (
    ConsoleFormatter,
    CorrelationIdFilter,
    CustomJsonFormatter,
    configure_logging,
    get_correlation_id,
    set_correlation_id,
)


def _record(msg: str = "hello", exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="saboriman.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


class TestCorrelationId:
    """Test correlation ID functionality."""

    def test_set_and_get_correlation_id(self):
        """Test setting and getting correlation ID."""
        result = set_correlation_id("scan-abc")
        assert result == "scan-abc"
        assert get_correlation_id() == "scan-abc"

    def test_set_correlation_id_generates_uuid_when_none(self):
        """Test that setting None generates a UUID."""
        result = set_correlation_id(None)
        assert len(result) == 36
        assert get_correlation_id() == result

    def test_filter_adds_correlation_id(self):
        """Test that the filter copies the context value onto the record."""
        set_correlation_id("req-1")
        record = _record()
        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "req-1"


class TestFormatters:
    """Test the two output formats."""

    def test_json_formatter_fields(self):
        """Test JSON output carries level, logger and correlation id."""
        formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
        record = _record("scan done")
        record.correlation_id = "scan-1"

        data = json.loads(formatter.format(record))

        assert data["message"] == "scan done"
        assert data["level"] == "INFO"
        assert data["logger"] == "saboriman.test"
        assert data["correlation_id"] == "scan-1"

    def test_compact_exception_chain_root_cause_first(self):
        """Test the compact formatter lists the cause before the wrapper."""
        try:
            try:
                raise OSError("disk gone")
            except OSError as e:
                raise RuntimeError("scan failed") from e
        except RuntimeError:
            exc_info = sys.exc_info()

        text = ConsoleFormatter().formatException(exc_info)

        assert text.index("OSError: disk gone") < text.index("RuntimeError: scan failed")
        assert "caused by OSError: disk gone" in text
        assert "raised RuntimeError: scan failed" in text

    def test_console_line_carries_correlation_id(self):
        """Test the console format tags lines with the scan/request id."""
        formatter = ConsoleFormatter(fmt="%(scan_tag)s │ %(message)s")
        record = _record("walk done")
        record.correlation_id = "scan-1a2b3c4d"

        assert formatter.format(record) == "scan-1a2b3c4d │ walk done"

    def test_console_line_without_correlation_id(self):
        """Test lines outside a request or scan get a placeholder tag."""
        formatter = ConsoleFormatter(fmt="%(scan_tag)s │ %(message)s")
        assert formatter.format(_record("startup")) == "- │ startup"


class TestLoggingConfiguration:
    """Test logging configuration."""

    def test_configure_logging_debug_level(self):
        """Test configuring logging with DEBUG level."""
        configure_logging(log_level="DEBUG", json_format=False, app_name="test-app")
        assert logging.getLogger("test").getEffectiveLevel() <= logging.DEBUG

    def test_configure_logging_replaces_handlers(self):
        """Test that calling configure twice doesn't duplicate handlers."""
        configure_logging(log_level="INFO", json_format=True, app_name="test-app")
        configure_logging(log_level="INFO", json_format=False, app_name="test-app")
        root_logger = logging.getLogger()
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, ConsoleFormatter)

    def test_configure_logging_json_format(self):
        """Test configuring logging with JSON format."""
        configure_logging(log_level="INFO", json_format=True, app_name="test-app")
        handler = logging.getLogger().handlers[0]
        assert isinstance(handler.formatter, CustomJsonFormatter)
