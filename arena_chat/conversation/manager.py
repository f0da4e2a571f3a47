"""Conversation transcript and the request/response cycle around it."""

from __future__ import annotations

import inspect
import logging
import uuid
from collections.abc import Callable
from datetime import datetime

from arena_chat.config import ArenaSettings
from arena_chat.conversation.export import export_markdown
from arena_chat.core.logging import correlation_scope
from arena_chat.core.metrics import CONTEXT_CHARS, observe_completion
from arena_chat.core.prompt_manager import PromptManager
from arena_chat.core.telemetry import get_tracer
from arena_chat.errors import (
    CompletionTransportError,
    ConversationStateError,
    MessageValidationError,
    RequestInFlightError,
)
from arena_chat.models.messages import (
    ConversationMessage,
    MessageRole,
    PromptMessage,
    utc_now,
)
from arena_chat.protocols.completion import CompletionClient, ProgressCallback
from arena_chat.protocols.context import ContextSource
from arena_chat.protocols.workspace import WorkspaceSummaryProvider

logger = logging.getLogger(__name__)
_TRACER = get_tracer("arena_chat.conversation")


class ConversationManager:
    """Owns one conversation: transcript, model selection and the send protocol.

    The user turn is recorded before the completion call and is kept when the
    call fails, so a failed request can be retried or regenerated without
    retyping. Only one send/regenerate may be outstanding at a time; a second
    call fails fast with :class:`RequestInFlightError` instead of interleaving
    its turns with the first.
    """

    def __init__(
        self,
        context_store: ContextSource,
        completion_client: CompletionClient,
        workspace: WorkspaceSummaryProvider,
        *,
        settings: ArenaSettings | None = None,
        prompt_manager: PromptManager | None = None,
        clock: Callable[[], datetime] = utc_now,
        conversation_id: str | None = None,
    ) -> None:
        settings = settings or ArenaSettings()
        self._context_store = context_store
        self._client = completion_client
        self._workspace = workspace
        self._prompts = prompt_manager or PromptManager(settings.prompt)
        self._clock = clock
        self._context_budget = settings.context.max_chars
        self._available_models = tuple(settings.models.available)
        self._model = settings.models.default
        self._history: list[ConversationMessage] = []
        self._in_flight = False
        self.conversation_id = conversation_id or uuid.uuid4().hex

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def send(self, user_text: str, on_progress: ProgressCallback | None = None) -> str:
        if not user_text.strip():
            raise MessageValidationError("message must not be empty")
        self._acquire()
        try:
            return await self._exchange(user_text, on_progress)
        finally:
            self._in_flight = False

    async def regenerate(self, on_progress: ProgressCallback | None = None) -> str:
        """Drop the last exchange and ask again with the same user text.

        On failure the exchange stays dropped and only the re-sent user
        message remains at the end of the transcript.
        """
        if self._in_flight:
            raise RequestInFlightError("a request is already in progress")
        if len(self._history) < 2:
            raise ConversationStateError("No previous response to regenerate")
        if self._history[-2].role != MessageRole.user:
            raise ConversationStateError("Last message is not a user message")

        self._acquire()
        try:
            self._history.pop()
            user_message = self._history.pop()
            logger.info("Regenerating response conversation_id=%s", self.conversation_id)
            return await self._exchange(user_message.content, on_progress)
        finally:
            self._in_flight = False

    def clear_history(self) -> None:
        self._history = []

    def history(self) -> list[ConversationMessage]:
        return [message.model_copy() for message in self._history]

    def export_conversation(self) -> str:
        return export_markdown(self._history, exported_at=self._clock())

    def set_model(self, model: str) -> None:
        if model not in self._available_models:
            raise MessageValidationError(f"Unknown model: {model}")
        self._model = model

    def get_model(self) -> str:
        return self._model

    def get_available_models(self) -> list[str]:
        return list(self._available_models)

    # ------------------------------------------------------------------

    def _acquire(self) -> None:
        if self._in_flight:
            raise RequestInFlightError("a request is already in progress")
        self._in_flight = True

    async def _exchange(self, user_text: str, on_progress: ProgressCallback | None) -> str:
        with correlation_scope(conversation_id=self.conversation_id, request_id=uuid.uuid4().hex):
            self._history.append(
                ConversationMessage(role=MessageRole.user, content=user_text, timestamp=self._clock())
            )
            messages = await self._build_messages()
            model = self._model
            logger.info(
                "Sending completion request model=%s history=%d",
                model,
                len(self._history),
            )

            try:
                with _TRACER.start_as_current_span("conversation.complete") as span:
                    span.set_attribute("arena_chat.model", model)
                    span.set_attribute("arena_chat.messages", len(messages))
                    with observe_completion(model):
                        response = await self._client.complete(messages, model, on_progress)
            except CompletionTransportError as exc:
                logger.warning("Completion failed model=%s: %s", model, exc)
                raise

            self._history.append(
                ConversationMessage(
                    role=MessageRole.assistant,
                    content=response,
                    timestamp=self._clock(),
                    model=model,
                )
            )
            logger.info("Completion succeeded model=%s chars=%d", model, len(response))
            return response

    async def _build_messages(self) -> list[PromptMessage]:
        context = self._context_store.serialize(self._context_budget)
        CONTEXT_CHARS.observe(len(context))

        workspace_info = self._workspace.describe()
        if inspect.isawaitable(workspace_info):
            workspace_info = await workspace_info

        system = self._prompts.render_system(workspace_info=workspace_info, context=context)
        return [
            PromptMessage(role=MessageRole.system, content=system),
            *(message.as_prompt() for message in self._history),
        ]


__all__ = ["ConversationManager"]
