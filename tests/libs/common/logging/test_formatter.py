"""Tests for JSON log formatter.

Tests verify that logs are formatted with:
- Required schema fields (timestamp, level, service, trace_id, message)
- Optional context fields
- Exception information
- Source location
"""

import json
import logging
import sys
from datetime import UTC, datetime

import pytest

from libs.common.logging.formatter import JSONFormatter


def _record(msg: str = "Test message", level: int = logging.INFO, args: tuple = ()) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="/path/to/file.py",
        lineno=42,
        msg=msg,
        args=args,
        exc_info=None,
    )


class TestJSONFormatter:
    """Test suite for JSONFormatter."""

    @pytest.fixture()
    def formatter(self) -> JSONFormatter:
        return JSONFormatter(service_name="order_entry")

    def test_basic_log_format(self, formatter: JSONFormatter) -> None:
        record = _record()
        record.trace_id = "trace-123"

        log_dict = json.loads(formatter.format(record))

        assert log_dict["level"] == "INFO"
        assert log_dict["service"] == "order_entry"
        assert log_dict["trace_id"] == "trace-123"
        assert log_dict["message"] == "Test message"
        assert "context" not in log_dict

    def test_timestamp_is_iso8601_utc(self, formatter: JSONFormatter) -> None:
        timestamp = json.loads(formatter.format(_record()))["timestamp"]

        assert timestamp.endswith("Z")
        assert datetime.fromisoformat(timestamp.replace("Z", "+00:00")).tzinfo == UTC

    def test_missing_trace_id_is_null(self, formatter: JSONFormatter) -> None:
        assert json.loads(formatter.format(_record()))["trace_id"] is None

    def test_explicit_context_dict(self, formatter: JSONFormatter) -> None:
        record = _record()
        record.context = {"order_id": "abc", "fund_name": "FundA"}

        log_dict = json.loads(formatter.format(record))

        assert log_dict["context"] == {"order_id": "abc", "fund_name": "FundA"}

    def test_extra_fields_become_context(self, formatter: JSONFormatter) -> None:
        record = _record()
        record.order_id = "abc"
        record.status = "Completed"

        log_dict = json.loads(formatter.format(record))

        assert log_dict["context"] == {"order_id": "abc", "status": "Completed"}

    def test_no_context_when_disabled(self) -> None:
        formatter = JSONFormatter(service_name="order_entry", include_context=False)
        record = _record()
        record.order_id = "abc"

        assert "context" not in json.loads(formatter.format(record))

    def test_exception_logging(self, formatter: JSONFormatter) -> None:
        try:
            raise ValueError("legacy link down")
        except ValueError:
            record = _record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        log_dict = json.loads(formatter.format(record))

        assert log_dict["exception"]["type"] == "ValueError"
        assert log_dict["exception"]["message"] == "legacy link down"
        assert "Traceback" in log_dict["exception"]["traceback"]

    def test_source_location(self, formatter: JSONFormatter) -> None:
        source = json.loads(formatter.format(_record()))["source"]

        assert source["file"] == "/path/to/file.py"
        assert source["line"] == 42

    def test_message_with_args(self, formatter: JSONFormatter) -> None:
        record = _record(msg="Order %s is %s", args=("abc", "Failed"))

        assert json.loads(formatter.format(record))["message"] == "Order abc is Failed"

    def test_non_serializable_context_is_stringified(self, formatter: JSONFormatter) -> None:
        record = _record()
        record.created_at = datetime(2024, 10, 17, tzinfo=UTC)

        log_dict = json.loads(formatter.format(record))

        assert log_dict["context"]["created_at"].startswith("2024-10-17")
