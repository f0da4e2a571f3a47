from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol, runtime_checkable

from arena_chat.models.messages import PromptMessage

ProgressCallback = Callable[[str], None]


@runtime_checkable
class CompletionClient(Protocol):
    async def complete(
        self,
        messages: Sequence[PromptMessage],
        model: str,
        on_progress: ProgressCallback | None = None,
    ) -> str: ...


__all__ = ["CompletionClient", "ProgressCallback"]
