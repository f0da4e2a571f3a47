"""Error taxonomy for the chat core.

Validation and state errors are raised before the transcript is touched.
Transport errors surface after the user turn has been recorded.
"""

from __future__ import annotations


class ArenaChatError(Exception):
    """Base class for every error raised by arena_chat."""


class MessageValidationError(ArenaChatError, ValueError):
    """Caller supplied an unusable value (empty message, unknown model)."""


class ConversationStateError(ArenaChatError, RuntimeError):
    """The transcript is not in a state that allows the requested operation."""


class RequestInFlightError(ConversationStateError):
    """Another send/regenerate is still waiting on the completion endpoint."""


class CompletionTransportError(ArenaChatError):
    """The completion endpoint failed: network, bad status or malformed body."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


__all__ = [
    "ArenaChatError",
    "CompletionTransportError",
    "ConversationStateError",
    "MessageValidationError",
    "RequestInFlightError",
]
