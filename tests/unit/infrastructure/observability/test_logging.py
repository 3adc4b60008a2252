"""Tests for structured logging."""

import json
import logging
import sys
from collections.abc import Iterator

import pytest

from focustracks.infrastructure.observability.logging import (
    CompactExceptionFormatter,
    CorrelationIdFilter,
    CustomJsonFormatter,
    configure_logging,
    get_correlation_id,
    set_correlation_id,
)


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """configure_logging replaces root handlers; put the originals back."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def make_record(
    msg: str = "playlist.move_track.completed", **extra: object
) -> logging.LogRecord:
    record = logging.LogRecord(
        name="focustracks.application",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestCorrelationId:
    """Test correlation ID functionality."""

    def test_set_and_get_correlation_id(self):
        """Test setting and getting correlation ID."""
        result = set_correlation_id("test-123-abc")
        assert result == "test-123-abc"
        assert get_correlation_id() == "test-123-abc"

    def test_set_correlation_id_generates_uuid_when_none(self):
        """Test that setting None generates a UUID."""
        result = set_correlation_id(None)
        assert len(result) == 36
        assert get_correlation_id() == result

    def test_filter_stamps_records(self):
        """Every record passing the filter carries the current ID."""
        set_correlation_id("req-7")
        record = make_record()

        assert CorrelationIdFilter().filter(record)
        assert record.correlation_id == "req-7"


class TestFormatters:
    """JSON and compact console output."""

    def test_json_formatter_fields(self):
        """Level, logger, correlation ID and extras end up in one JSON object."""
        formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
        record = make_record(correlation_id="req-9", playlist_id="p1")

        payload = json.loads(formatter.format(record))

        assert payload["message"] == "playlist.move_track.completed"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "focustracks.application"
        assert payload["correlation_id"] == "req-9"
        assert payload["playlist_id"] == "p1"

    def test_compact_formatter_prints_root_cause_first(self):
        """Chained exceptions are printed oldest first."""
        try:
            try:
                raise KeyError("missing row")
            except KeyError as inner:
                raise RuntimeError("renumber failed") from inner
        except RuntimeError:
            exc_info = sys.exc_info()

        text = CompactExceptionFormatter().formatException(exc_info)

        lines = [line for line in text.splitlines() if line.startswith("╰─►")]
        assert lines == [
            "╰─► KeyError: 'missing row'",
            "╰─► RuntimeError: renumber failed",
        ]


class TestLoggingConfiguration:
    """Test logging configuration."""

    def test_configure_logging_debug_level(self):
        """Test configuring logging with DEBUG level."""
        configure_logging(log_level="DEBUG", json_format=False, app_name="test-app")
        assert logging.getLogger("test").getEffectiveLevel() <= logging.DEBUG

    def test_configure_logging_replaces_handlers(self):
        """Calling twice leaves exactly one handler."""
        configure_logging(log_level="INFO", json_format=True)
        configure_logging(log_level="INFO", json_format=False)

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, CompactExceptionFormatter)

    def test_json_format_selects_json_formatter(self):
        """Production mode emits JSON."""
        configure_logging(log_level="WARNING", json_format=True)

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, CustomJsonFormatter)

    def test_unknown_level_falls_back_to_info(self):
        """A typo in the level does not crash startup."""
        configure_logging(log_level="LOUD")
        assert logging.getLogger().level == logging.INFO

    def test_noisy_libraries_are_quieted(self):
        """HTTP client and driver loggers only report warnings."""
        configure_logging(log_level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("aiosqlite").level == logging.WARNING
