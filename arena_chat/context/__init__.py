"""Context: ordered item store, item factories and workspace summaries."""

from arena_chat.context.store import ContextStore, render_block
from arena_chat.context.workspace import (
    NO_WORKSPACE,
    DirectoryWorkspaceSummary,
    StaticWorkspaceSummary,
)

__all__ = [
    "NO_WORKSPACE",
    "ContextStore",
    "DirectoryWorkspaceSummary",
    "StaticWorkspaceSummary",
    "render_block",
]
