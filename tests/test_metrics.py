from __future__ import annotations

import pytest
from arena_chat.core.metrics import COMPLETIONS_TOTAL, observe_completion
from prometheus_client import generate_latest


def _count(model: str, outcome: str) -> float:
    return COMPLETIONS_TOTAL.labels(model=model, outcome=outcome)._value.get()


def test_observe_completion_counts_success() -> None:
    before = _count("metrics-ok", "success")
    with observe_completion("metrics-ok"):
        pass
    assert _count("metrics-ok", "success") == before + 1


def test_observe_completion_counts_error_and_reraises() -> None:
    before = _count("metrics-err", "error")
    with pytest.raises(RuntimeError), observe_completion("metrics-err"):
        raise RuntimeError("boom")
    assert _count("metrics-err", "error") == before + 1


def test_exposition_lists_completion_metrics() -> None:
    with observe_completion("metrics-expose"):
        pass
    text = generate_latest().decode()
    assert "arena_chat_completions_total" in text
    assert "arena_chat_completion_duration_seconds" in text
