"""Completion clients: concrete transports behind the CompletionClient protocol."""

from __future__ import annotations

from arena_chat.clients.arena import ArenaEditPairClient
from arena_chat.clients.openai_compat import ChatCompletionsClient
from arena_chat.config import ServerApi, ServerConfig


def build_completion_client(
    server: ServerConfig,
) -> ArenaEditPairClient | ChatCompletionsClient:
    if server.api == ServerApi.openai:
        return ChatCompletionsClient(
            server.url,
            timeout_s=server.timeout_s,
            api_key=server.api_key,
            stream=server.stream,
            max_tokens=server.max_tokens,
            temperature=server.temperature,
        )
    return ArenaEditPairClient(
        server.url,
        timeout_s=server.timeout_s,
        api_key=server.api_key,
    )


__all__ = ["ArenaEditPairClient", "ChatCompletionsClient", "build_completion_client"]
