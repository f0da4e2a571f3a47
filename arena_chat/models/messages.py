from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator


def utc_now() -> datetime:
    return datetime.now(UTC)


class MessageRole(StrEnum):
    user = "user"
    assistant = "assistant"
    system = "system"


class ConversationMessage(BaseModel):
    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=utc_now)
    model: str | None = None
    """Set on assistant messages only: the model that produced the reply."""

    @field_validator("timestamp")
    @classmethod
    def _ensure_timezone_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
            raise ValueError("timestamp must be timezone-aware")
        return value

    def as_prompt(self) -> PromptMessage:
        return PromptMessage(role=self.role, content=self.content)


class PromptMessage(BaseModel):
    """Wire shape handed to a completion client."""

    role: MessageRole
    content: str


__all__ = [
    "ConversationMessage",
    "MessageRole",
    "PromptMessage",
    "utc_now",
]
