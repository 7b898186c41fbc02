"""Tests for logging configuration and trace ID context."""

import json
import logging

import pytest

from libs.common.logging.config import TraceIDFilter, configure_logging, log_with_context
from libs.common.logging.context import (
    LogContext,
    clear_trace_id,
    get_trace_id,
    set_trace_id,
)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    clear_trace_id()


class TestTraceIDFilter:
    def test_filter_adds_trace_id_to_record(self) -> None:
        set_trace_id("trace-abc")
        record = logging.LogRecord("t", logging.INFO, "f.py", 1, "m", (), None)

        assert TraceIDFilter().filter(record) is True
        assert record.trace_id == "trace-abc"

    def test_filter_adds_none_when_no_trace_id(self) -> None:
        record = logging.LogRecord("t", logging.INFO, "f.py", 1, "m", (), None)

        TraceIDFilter().filter(record)

        assert record.trace_id is None


class TestLogContext:
    def test_scopes_trace_id(self) -> None:
        with LogContext("startup") as trace_id:
            assert trace_id == "startup"
            assert get_trace_id() == "startup"

        assert get_trace_id() is None

    def test_restores_previous_trace_id(self) -> None:
        set_trace_id("outer")

        with LogContext():
            assert get_trace_id() != "outer"

        assert get_trace_id() == "outer"

    def test_empty_trace_id_rejected(self) -> None:
        with pytest.raises(ValueError):
            set_trace_id("")


class TestConfigureLogging:
    def test_sets_level_and_single_handler(self) -> None:
        root = configure_logging(service_name="order_entry", log_level="debug")

        assert root is logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1

    def test_repeated_calls_do_not_duplicate_handlers(self) -> None:
        configure_logging(service_name="order_entry")
        configure_logging(service_name="order_entry")

        assert len(logging.getLogger().handlers) == 1

    def test_invalid_level_raises_error(self) -> None:
        with pytest.raises(ValueError, match="Invalid log level"):
            configure_logging(service_name="order_entry", log_level="LOUD")

    def test_outputs_json_with_trace_id(self, capsys) -> None:
        configure_logging(service_name="order_entry")
        set_trace_id("trace-xyz")

        logging.getLogger("apps.order_entry").info("AUDIT: Order abc created")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        log_dict = json.loads(line)
        assert log_dict["service"] == "order_entry"
        assert log_dict["trace_id"] == "trace-xyz"
        assert log_dict["message"] == "AUDIT: Order abc created"


def test_log_with_context_groups_fields(caplog) -> None:
    logger = logging.getLogger("apps.order_entry.test")

    with caplog.at_level(logging.INFO):
        log_with_context(logger, "WARNING", "Order failed", order_id="abc", reason="timeout")

    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert record.context == {"order_id": "abc", "reason": "timeout"}
