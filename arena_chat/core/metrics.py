"""Prometheus metrics for completion calls and context assembly.

All metric objects are module-level singletons registered on the default
registry.
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import Counter, Histogram

COMPLETIONS_TOTAL = Counter(
    "arena_chat_completions_total",
    "Completion requests by model and outcome",
    ["model", "outcome"],
)
COMPLETION_DURATION_SECONDS = Histogram(
    "arena_chat_completion_duration_seconds",
    "Completion request duration in seconds",
    ["model"],
)
CONTEXT_CHARS = Histogram(
    "arena_chat_context_chars",
    "Size of the serialized context sent with each request",
    buckets=(0, 500, 1_000, 2_500, 5_000, 10_000, 25_000, 50_000),
)


@contextmanager
def observe_completion(model: str) -> Iterator[None]:
    """Count the completion by outcome and observe its duration."""
    start = time.monotonic()
    outcome = "error"
    try:
        yield
        outcome = "success"
    finally:
        COMPLETIONS_TOTAL.labels(model=model, outcome=outcome).inc()
        COMPLETION_DURATION_SECONDS.labels(model=model).observe(time.monotonic() - start)


__all__ = [
    "COMPLETIONS_TOTAL",
    "COMPLETION_DURATION_SECONDS",
    "CONTEXT_CHARS",
    "observe_completion",
]
