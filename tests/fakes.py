from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from arena_chat.errors import CompletionTransportError
from arena_chat.models.messages import PromptMessage
from arena_chat.protocols.completion import ProgressCallback


@dataclass(slots=True)
class CompletionCall:
    messages: list[PromptMessage]
    model: str


@dataclass
class FakeCompletionClient:
    """Scripted completion client.

    Each call pops the next entry of ``replies``: a string is returned, an
    exception is raised. With ``replies`` exhausted it echoes the last user
    message. When ``gate`` is set, calls wait on it before answering.
    """

    replies: list[str | Exception] = field(default_factory=list)
    calls: list[CompletionCall] = field(default_factory=list)
    gate: asyncio.Event | None = None
    closed: bool = False

    async def complete(
        self,
        messages: Sequence[PromptMessage],
        model: str,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        self.calls.append(CompletionCall(messages=list(messages), model=model))
        if self.gate is not None:
            await self.gate.wait()

        if self.replies:
            reply = self.replies.pop(0)
        else:
            reply = f"echo: {messages[-1].content}"
        if isinstance(reply, Exception):
            raise reply
        if on_progress is not None:
            on_progress(reply)
        return reply

    async def aclose(self) -> None:
        self.closed = True


def transport_error(message: str = "API Error: HTTP error! status: 500") -> CompletionTransportError:
    return CompletionTransportError(message, status_code=500)


class StaticWorkspace:
    def __init__(self, text: str = "Workspace: demo\nPath: /work/demo\n") -> None:
        self.text = text
        self.calls = 0

    def describe(self) -> str:
        self.calls += 1
        return self.text


class AsyncWorkspace:
    def __init__(self, text: str) -> None:
        self.text = text

    async def describe(self) -> str:
        await asyncio.sleep(0)
        return self.text


class SteppingClock:
    """Deterministic clock advancing one second per reading."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        value = self.current
        self.current = value + timedelta(seconds=1)
        return value
