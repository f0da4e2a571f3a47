"""Client for OpenAI-compatible ``/v1/chat/completions`` endpoints.

Supports both a single JSON reply and server-sent event streaming; streamed
deltas are forwarded to the progress callback as they arrive.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import httpx
from pydantic import BaseModel, Field, ValidationError

from arena_chat.errors import CompletionTransportError
from arena_chat.models.messages import PromptMessage
from arena_chat.protocols.completion import ProgressCallback

logger = logging.getLogger(__name__)

_SSE_DATA = "data:"
_SSE_DONE = "[DONE]"


class ChatRequest(BaseModel):
    messages: list[PromptMessage]
    model: str
    stream: bool = False
    max_tokens: int | None = None
    temperature: float | None = None


class _ChoiceMessage(BaseModel):
    role: str = "assistant"
    content: str | None = None


class _Choice(BaseModel):
    message: _ChoiceMessage


class ChatResponse(BaseModel):
    choices: list[_Choice] = Field(default_factory=list)


class _Delta(BaseModel):
    content: str | None = None


class _StreamChoice(BaseModel):
    delta: _Delta = Field(default_factory=_Delta)


class ChatStreamChunk(BaseModel):
    choices: list[_StreamChoice] = Field(default_factory=list)


class ChatCompletionsClient:
    """CompletionClient for servers speaking the chat-completions protocol."""

    def __init__(
        self,
        base_url: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout_s: float = 60.0,
        api_key: str | None = None,
        stream: bool = False,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> None:
        self._url = f"{base_url.rstrip('/')}/v1/chat/completions"
        self._http = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout_s))
        self._headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._stream = stream
        self._max_tokens = max_tokens
        self._temperature = temperature

    async def complete(
        self,
        messages: Sequence[PromptMessage],
        model: str,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        request = ChatRequest(
            messages=list(messages),
            model=model,
            stream=self._stream,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
        )
        payload = request.model_dump(mode="json", exclude_none=True)
        try:
            if self._stream:
                return await self._complete_streaming(payload, on_progress)
            return await self._complete_once(payload, on_progress)
        except httpx.HTTPError as exc:
            raise CompletionTransportError(f"API Error: {str(exc) or type(exc).__name__}") from exc

    async def _complete_once(
        self, payload: dict[str, object], on_progress: ProgressCallback | None
    ) -> str:
        resp = await self._http.post(self._url, json=payload, headers=self._headers)
        _raise_for_status(resp)
        try:
            body = ChatResponse.model_validate_json(resp.content)
        except ValidationError as exc:
            raise _invalid_response(resp) from exc
        if not body.choices or body.choices[0].message.content is None:
            raise _invalid_response(resp)

        content = body.choices[0].message.content
        if on_progress is not None:
            on_progress(content)
        return content

    async def _complete_streaming(
        self, payload: dict[str, object], on_progress: ProgressCallback | None
    ) -> str:
        parts: list[str] = []
        events = 0
        done = False
        async with self._http.stream("POST", self._url, json=payload, headers=self._headers) as resp:
            if not resp.is_success:
                await resp.aread()
                _raise_for_status(resp)

            async for line in resp.aiter_lines():
                line = line.strip()
                if not line.startswith(_SSE_DATA):
                    continue
                data = line[len(_SSE_DATA) :].strip()
                if data == _SSE_DONE:
                    done = True
                    break
                try:
                    chunk = ChatStreamChunk.model_validate_json(data)
                except ValidationError as exc:
                    raise _invalid_response(resp) from exc
                events += 1
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if not delta:
                    continue
                parts.append(delta)
                if on_progress is not None:
                    on_progress(delta)

            # A stream without events, or one cut off before [DONE], is not a reply.
            if not done or events == 0:
                logger.warning("Incomplete stream: events=%d done=%s", events, done)
                raise _invalid_response(resp)

        logger.debug("Stream finished with %d chunks", len(parts))
        return "".join(parts)

    async def aclose(self) -> None:
        await self._http.aclose()


def _raise_for_status(resp: httpx.Response) -> None:
    if not resp.is_success:
        raise CompletionTransportError(
            f"API Error: HTTP error! status: {resp.status_code}",
            status_code=resp.status_code,
        )


def _invalid_response(resp: httpx.Response) -> CompletionTransportError:
    return CompletionTransportError(
        "API Error: Invalid response from API", status_code=resp.status_code
    )


__all__ = ["ChatCompletionsClient", "ChatRequest", "ChatResponse", "ChatStreamChunk"]
