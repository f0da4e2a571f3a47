"""Client for the Arena ``/create_edit_pair`` endpoint.

The endpoint has no chat route, so the whole message list is flattened into
one prompt and submitted as an edit request. The server answers with one
response item per model it ran.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from arena_chat.config import DEFAULT_SERVER_URL
from arena_chat.errors import CompletionTransportError
from arena_chat.models.messages import MessageRole, PromptMessage
from arena_chat.protocols.completion import ProgressCallback

logger = logging.getLogger(__name__)

_USER_INPUT = "Please provide a helpful response to the user's question."

_SECTION_TITLES: dict[MessageRole, str] = {
    MessageRole.system: "System Context",
    MessageRole.user: "User Question",
    MessageRole.assistant: "Assistant Response",
}


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class EditPairRequest(_CamelModel):
    pair_id: str
    user_id: str = "chat-user"
    prefix: str = ""
    suffix: str = ""
    code_to_edit: str
    user_input: str = _USER_INPUT
    language: str = "markdown"
    privacy: str = "Private"
    model_tags: list[str] = Field(default_factory=lambda: ["edit"])


class ArenaEditItem(_CamelModel):
    response: str
    edit_id: str | None = None
    model: str | None = None


class EditPairResponse(_CamelModel):
    pair_id: str | None = None
    response_items: list[ArenaEditItem] = Field(default_factory=list)


def flatten_messages(messages: Sequence[PromptMessage]) -> str:
    prompt = ""
    for message in messages:
        prompt += f"{_SECTION_TITLES[message.role]}:\n{message.content}\n\n"
    prompt += "\nAssistant Response:"
    return prompt


class ArenaEditPairClient:
    """CompletionClient backed by the Arena edit-pair endpoint."""

    def __init__(
        self,
        base_url: str = DEFAULT_SERVER_URL,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout_s: float = 60.0,
        api_key: str | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        # Allow injection for testing; avoids real HTTP in tests
        self._http = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout_s))
        self._headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}

    async def complete(
        self,
        messages: Sequence[PromptMessage],
        model: str,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        request = EditPairRequest(
            pair_id=f"chat-{int(time.time() * 1000)}",
            code_to_edit=flatten_messages(messages),
        )
        url = f"{self._base_url}/create_edit_pair"
        try:
            resp = await self._http.post(
                url,
                json=request.model_dump(by_alias=True),
                headers=self._headers,
            )
        except httpx.HTTPError as exc:
            raise CompletionTransportError(f"API Error: {str(exc) or type(exc).__name__}") from exc

        if not resp.is_success:
            raise CompletionTransportError(
                f"API Error: HTTP error! status: {resp.status_code}",
                status_code=resp.status_code,
            )

        try:
            payload = EditPairResponse.model_validate_json(resp.content)
        except ValidationError as exc:
            raise CompletionTransportError(
                "API Error: Invalid response from API", status_code=resp.status_code
            ) from exc
        if not payload.response_items:
            raise CompletionTransportError(
                "API Error: Invalid response from API", status_code=resp.status_code
            )

        items = payload.response_items
        chosen = next((item for item in items if item.model == model), items[0])
        if chosen.model is not None and chosen.model != model:
            logger.debug("Requested model %s not in pair; using %s", model, chosen.model)
        if on_progress is not None:
            on_progress(chosen.response)
        return chosen.response

    async def aclose(self) -> None:
        await self._http.aclose()


__all__ = [
    "ArenaEditItem",
    "ArenaEditPairClient",
    "EditPairRequest",
    "EditPairResponse",
    "flatten_messages",
]
