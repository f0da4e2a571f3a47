from __future__ import annotations

import pytest
from arena_chat.config import ArenaSettings
from arena_chat.context.store import ContextStore
from arena_chat.conversation.manager import ConversationManager

from tests.fakes import FakeCompletionClient, StaticWorkspace, SteppingClock


@pytest.fixture
def settings() -> ArenaSettings:
    return ArenaSettings()


@pytest.fixture
def context_store() -> ContextStore:
    return ContextStore()


@pytest.fixture
def completion_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def workspace() -> StaticWorkspace:
    return StaticWorkspace()


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def manager(
    context_store: ContextStore,
    completion_client: FakeCompletionClient,
    workspace: StaticWorkspace,
    settings: ArenaSettings,
    clock: SteppingClock,
) -> ConversationManager:
    return ConversationManager(
        context_store,
        completion_client,
        workspace,
        settings=settings,
        clock=clock,
        conversation_id="conv-test",
    )
