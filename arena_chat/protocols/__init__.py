from arena_chat.protocols.completion import CompletionClient, ProgressCallback
from arena_chat.protocols.context import ContextSource
from arena_chat.protocols.workspace import WorkspaceSummaryProvider

__all__ = [
    "CompletionClient",
    "ContextSource",
    "ProgressCallback",
    "WorkspaceSummaryProvider",
]
