from __future__ import annotations

from collections.abc import Awaitable
from typing import Protocol, runtime_checkable


@runtime_checkable
class WorkspaceSummaryProvider(Protocol):
    def describe(self) -> str | Awaitable[str]: ...


__all__ = ["WorkspaceSummaryProvider"]
