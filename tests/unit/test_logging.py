#  Agent Dashboard - Structured Logging Tests
#
#  Tests for JSON formatter and context variable propagation.
#
#  Depends on: dashboard/logging_config.py
#  Used by:    pytest

import json
import logging
import sys

import pytest

from dashboard.logging_config import (
    ContextFilter,
    JSONFormatter,
    request_id_var,
    set_request_id,
    set_user_id,
    setup_logging,
    user_id_var,
)


def _record(msg="hello world", level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord(
        name="test", level=level, pathname="", lineno=0,
        msg=msg, args=(), exc_info=exc_info,
    )
    record.__dict__.update(extra)
    return record


@pytest.fixture
def dashboard_logger():
    """The "dashboard" logger with handlers, level and propagation restored afterwards."""
    logger = logging.getLogger("dashboard")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    logger.handlers.clear()
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


class TestJSONFormatter:
    def test_output_is_valid_json(self):
        """JSON formatter produces valid JSON."""
        data = json.loads(JSONFormatter().format(_record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "test"
        assert data["message"] == "hello world"
        assert data["timestamp"].endswith("Z")

    def test_request_id_included_when_set(self):
        token = request_id_var.set("req-abc123")
        try:
            data = json.loads(JSONFormatter().format(_record("with request")))
            assert data["request_id"] == "req-abc123"
        finally:
            request_id_var.reset(token)

    def test_user_id_included_when_set(self):
        token = user_id_var.set(42)
        try:
            data = json.loads(JSONFormatter().format(_record("with user")))
            assert data["user_id"] == 42
        finally:
            user_id_var.reset(token)

    def test_context_vars_absent_when_not_set(self):
        """request_id and user_id are omitted when context vars are None."""
        set_request_id(None)
        set_user_id(None)
        data = json.loads(JSONFormatter().format(_record("no context")))
        assert "request_id" not in data
        assert "user_id" not in data

    def test_exception_included(self):
        try:
            raise ValueError("test error")
        except ValueError:
            exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(_record("oops", logging.ERROR, exc_info)))
        assert "ValueError" in data["exception"]


    def test_extra_fields_included(self):
        record = _record("turn", session_id=3, model="kimi-k2", duration_ms=120)
        data = json.loads(JSONFormatter().format(record))
        assert data["session_id"] == 3
        assert data["model"] == "kimi-k2"
        assert data["duration_ms"] == 120

    def test_unlisted_extra_fields_ignored(self):
        data = json.loads(JSONFormatter().format(_record("x", password="hunter2")))
        assert "password" not in data


class TestContextFilter:
    def test_stamps_request_id(self):
        token = request_id_var.set("abc123def456")
        try:
            record = _record()
            assert ContextFilter().filter(record) is True
            assert record.request_id == "abc123def456"
        finally:
            request_id_var.reset(token)

    def test_placeholder_without_request(self):
        set_request_id(None)
        record = _record()
        ContextFilter().filter(record)
        assert record.request_id == "-"
        assert record.user_id is None


class TestSetupLogging:
    def test_json_format(self, dashboard_logger):
        setup_logging("INFO", "json")
        assert len(dashboard_logger.handlers) == 1
        assert isinstance(dashboard_logger.handlers[0].formatter, JSONFormatter)
        assert dashboard_logger.level == logging.INFO
        assert dashboard_logger.propagate is False

    def test_text_format_carries_request_id(self, dashboard_logger):
        setup_logging("DEBUG", "text")
        handler = dashboard_logger.handlers[0]
        assert not isinstance(handler.formatter, JSONFormatter)
        assert dashboard_logger.level == logging.DEBUG

        token = request_id_var.set("feedbeef0001")
        try:
            record = _record("hi")
            handler.filter(record)
            assert "rid=feedbeef0001" in handler.format(record)
        finally:
            request_id_var.reset(token)

    def test_idempotent(self, dashboard_logger):
        """Calling setup_logging twice doesn't duplicate handlers."""
        setup_logging("INFO", "json")
        setup_logging("WARNING", "json")
        assert len(dashboard_logger.handlers) == 1
        assert dashboard_logger.level == logging.WARNING

    def test_quiets_noisy_libraries(self, dashboard_logger):
        setup_logging("DEBUG", "json")
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING
