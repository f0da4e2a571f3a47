"""Structured logging setup with correlation context propagation.

Every record carries the conversation and request it belongs to, so the log
lines of one send/regenerate cycle can be grouped even when several
conversations share a process.
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime

from opentelemetry import trace


@dataclass(frozen=True, slots=True)
class CorrelationContext:
    conversation_id: str | None = None
    request_id: str | None = None


_EMPTY_CONTEXT = CorrelationContext()
_CORRELATION_CONTEXT: contextvars.ContextVar[CorrelationContext | None] = contextvars.ContextVar(
    "arena_chat_correlation_context",
    default=None,
)


def get_correlation_context() -> CorrelationContext:
    """Return the correlation IDs of the active execution context."""

    context = _CORRELATION_CONTEXT.get()
    if context is None:
        return _EMPTY_CONTEXT
    return context


def _current_otel_trace_id() -> str:
    span_context = trace.get_current_span().get_span_context()
    if span_context.trace_id:
        return format(span_context.trace_id, "032x")
    return ""


class CorrelationFilter(logging.Filter):
    """Inject correlation fields into every ``LogRecord`` before formatting."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = get_correlation_context()
        record.conversation_id = context.conversation_id
        record.request_id = context.request_id
        record.otel_trace_id = _current_otel_trace_id()
        return True


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object | None] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "conversation_id": getattr(record, "conversation_id", None),
            "request_id": getattr(record, "request_id", None),
            "trace_id": getattr(record, "otel_trace_id", None),
        }
        if record.exc_info is not None:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def setup_logging(level: int | str = logging.INFO, json_output: bool = False) -> None:
    """Configure root logging once with correlation-aware handlers.

    Logs go to stderr so CLI answers on stdout stay clean for piping.
    """

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.filters.clear()

    handler = logging.StreamHandler(stream=sys.stderr)
    if json_output:
        formatter: logging.Formatter = _JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s "
            "conversation_id=%(conversation_id)s request_id=%(request_id)s "
            "trace_id=%(otel_trace_id)s "
            "%(message)s",
        )
    handler.setFormatter(formatter)

    correlation_filter = CorrelationFilter()
    handler.addFilter(correlation_filter)
    root_logger.addFilter(correlation_filter)
    root_logger.addHandler(handler)


@contextmanager
def correlation_scope(
    *,
    conversation_id: str | None = None,
    request_id: str | None = None,
) -> Iterator[None]:
    """Temporarily apply correlation IDs to the current async execution context.

    Nested scopes inherit outer values unless explicitly overridden.
    """

    current = get_correlation_context()
    updated = CorrelationContext(
        conversation_id=current.conversation_id if conversation_id is None else conversation_id,
        request_id=current.request_id if request_id is None else request_id,
    )
    token = _CORRELATION_CONTEXT.set(updated)
    try:
        yield
    finally:
        _CORRELATION_CONTEXT.reset(token)


__all__ = [
    "CorrelationContext",
    "CorrelationFilter",
    "correlation_scope",
    "get_correlation_context",
    "setup_logging",
]
