from arena_chat.models.context import ContextItem, ContextKind
from arena_chat.models.messages import (
    ConversationMessage,
    MessageRole,
    PromptMessage,
    utc_now,
)

__all__ = [
    "ContextItem",
    "ContextKind",
    "ConversationMessage",
    "MessageRole",
    "PromptMessage",
    "utc_now",
]
