"""
Tests for structured logging configuration.
"""

import structlog

from apps.core.logging import (
    _add_trace_id,
    _convert_duration_to_nanoseconds,
    bind_contextvars,
    clear_contextvars,
    configure_logging,
    get_contextvars,
    get_logger,
)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_logging_json_format(self):
        configure_logging(json_format=True, log_level="INFO")

        assert structlog.is_configured()

    def test_configure_logging_console_format(self):
        configure_logging(json_format=False, log_level="DEBUG")

        assert structlog.is_configured()

    def test_get_logger_returns_bound_logger(self):
        assert get_logger("apps.billing.services") is not None


class TestProcessors:
    """Tests for the custom structlog processors."""

    def test_correlation_id_is_renamed_to_trace_id(self):
        event = _add_trace_id(None, "info", {"event": "x", "correlation_id": "abc"})

        assert event == {"event": "x", "trace_id": "abc"}

    def test_event_without_correlation_id_is_untouched(self):
        event = _add_trace_id(None, "info", {"event": "x"})

        assert event == {"event": "x"}

    def test_duration_ms_becomes_nanoseconds(self):
        event = _convert_duration_to_nanoseconds(None, "info", {"duration_ms": 1.5})

        assert event == {"duration": 1_500_000}


class TestContextVars:
    """Tests for context variable binding."""

    def setup_method(self):
        clear_contextvars()

    def teardown_method(self):
        clear_contextvars()

    def test_bind_contextvars_with_dotted_keys(self):
        bind_contextvars(**{"usr.id": "7", "request.ip_address": "10.0.0.1"})

        ctx = get_contextvars()
        assert ctx["usr.id"] == "7"
        assert ctx["request.ip_address"] == "10.0.0.1"

    def test_clear_contextvars_removes_everything(self):
        bind_contextvars(correlation_id="abc")

        clear_contextvars()

        assert get_contextvars() == {}
