from __future__ import annotations

import json
import logging

from arena_chat.core.logging import (
    CorrelationFilter,
    _JsonFormatter,
    correlation_scope,
    get_correlation_context,
)


def _record(message: str = "hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )


def test_correlation_filter_injects_fields() -> None:
    correlation_filter = CorrelationFilter()
    record = _record()

    with correlation_scope(conversation_id="conv-1", request_id="req-1"):
        assert correlation_filter.filter(record) is True

    assert record.conversation_id == "conv-1"
    assert record.request_id == "req-1"
    assert record.otel_trace_id == ""


def test_correlation_scope_sets_and_clears_context() -> None:
    baseline = get_correlation_context()

    with correlation_scope(conversation_id="conv-2", request_id="req-2"):
        current = get_correlation_context()
        assert current.conversation_id == "conv-2"
        assert current.request_id == "req-2"

    assert get_correlation_context() == baseline


def test_correlation_scope_nested_inherits_and_restores() -> None:
    baseline = get_correlation_context()

    with correlation_scope(conversation_id="conv-outer"):
        outer = get_correlation_context()
        assert outer.conversation_id == "conv-outer"
        assert outer.request_id is None

        with correlation_scope(request_id="req-inner"):
            inner = get_correlation_context()
            assert inner.conversation_id == "conv-outer"
            assert inner.request_id == "req-inner"

        assert get_correlation_context() == outer

    assert get_correlation_context() == baseline


def test_json_formatter_includes_correlation() -> None:
    record = _record("sent")
    with correlation_scope(conversation_id="conv-3", request_id="req-3"):
        CorrelationFilter().filter(record)

    payload = json.loads(_JsonFormatter().format(record))
    assert payload["message"] == "sent"
    assert payload["level"] == "INFO"
    assert payload["conversation_id"] == "conv-3"
    assert payload["request_id"] == "req-3"
