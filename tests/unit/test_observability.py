"""Unit tests for structured logging utilities in ``observability``.

Validates the null handler, trace binding, and event construction behaviour
the engine and adapters rely on.
"""

from __future__ import annotations

import logging

import pytest

from lib_effective_config import bind_trace_id, get_logger
from lib_effective_config.observability import TRACE_ID, log_debug, log_info, make_event


def test_null_handler_present() -> None:
    """Package logger should always include a NullHandler to avoid surprises."""

    logger = get_logger()
    assert any(isinstance(handler, logging.NullHandler) for handler in logger.handlers)


def test_trace_id_in_log(caplog: pytest.LogCaptureFixture) -> None:
    """Structured logs should include the bound trace identifier and contextual fields."""

    caplog.set_level(logging.INFO, logger="lib_effective_config")
    bind_trace_id("trace-123")
    try:
        log_info("report_built", source="env", key=None)
    finally:
        bind_trace_id(None)
    record = caplog.records[-1]
    assert getattr(record, "context") == {"trace_id": "trace-123", "source": "env", "key": None}


def test_debug_entries_skipped_when_level_disabled(caplog: pytest.LogCaptureFixture) -> None:
    """Debug events should not be recorded while the logger only accepts INFO."""

    caplog.set_level(logging.INFO, logger="lib_effective_config")
    log_debug("placeholder_unresolved", **make_event(None, "missing"))
    assert not [record for record in caplog.records if record.getMessage() == "placeholder_unresolved"]


def test_bind_trace_id_clears_context() -> None:
    """Clearing the trace ID should reset the context variable to None."""

    bind_trace_id("trace-temp")
    bind_trace_id(None)
    assert TRACE_ID.get() is None


def test_make_event_merges_optional_payload() -> None:
    """make_event should merge optional metadata next to the source/key fields."""

    assert make_event("dotenv", "TOKEN", {"line": 3}) == {"source": "dotenv", "key": "TOKEN", "line": 3}
    assert make_event("dotenv", None) == {"source": "dotenv", "key": None}
