from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ContextSource(Protocol):
    def serialize(self, max_chars: int | None = None) -> str: ...


__all__ = ["ContextSource"]
