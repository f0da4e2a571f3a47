"""Factories that turn already-extracted editor text into context items.

Each factory returns ``(key, item)``. Keys are derived deterministically so
re-adding the same file, selection or symbol replaces the earlier entry in place.
Line numbers are 0-based on input, matching what editors hand out, and are
stored 1-based on the item.
"""

from __future__ import annotations

from pathlib import PurePosixPath

from arena_chat.models.context import ContextItem, ContextKind

TERMINAL_KEY = "terminal-latest"
TERMINAL_MAX_CHARS = 1000


def _basename(uri: str, relative_path: str | None) -> str:
    name = PurePosixPath(relative_path or uri).name
    return name or uri


def file_item(
    uri: str,
    content: str,
    *,
    relative_path: str | None = None,
    language: str | None = None,
) -> tuple[str, ContextItem]:
    item = ContextItem(
        kind=ContextKind.file,
        label=_basename(uri, relative_path),
        description=relative_path or uri,
        content=content,
        language=language,
        path=relative_path or uri,
    )
    return uri, item


def selection_item(
    uri: str,
    content: str,
    *,
    start_line: int,
    end_line: int,
    relative_path: str | None = None,
    language: str | None = None,
) -> tuple[str, ContextItem]:
    shown_path = relative_path or uri
    item = ContextItem(
        kind=ContextKind.selection,
        label=f"Selection from {_basename(uri, relative_path)}",
        description=f"{shown_path} (Lines {start_line + 1}-{end_line + 1})",
        content=content,
        language=language,
        path=shown_path,
        line_start=start_line + 1,
        line_end=end_line + 1,
    )
    return f"selection-{uri}-{start_line}-{end_line}", item


def symbol_item(
    uri: str,
    name: str,
    content: str,
    *,
    symbol_kind: str,
    relative_path: str | None = None,
    language: str | None = None,
    start_line: int | None = None,
    end_line: int | None = None,
) -> tuple[str, ContextItem]:
    shown_path = relative_path or uri
    item = ContextItem(
        kind=ContextKind.symbol,
        label=name,
        description=f"{symbol_kind} in {shown_path}",
        content=content,
        language=language,
        path=shown_path,
        line_start=None if start_line is None else start_line + 1,
        line_end=None if end_line is None else end_line + 1,
    )
    return f"symbol-{uri}-{name}", item


def terminal_item(output: str, *, max_chars: int = TERMINAL_MAX_CHARS) -> tuple[str, ContextItem]:
    """Build the terminal item, capping raw output before it is ever stored."""
    item = ContextItem(
        kind=ContextKind.terminal,
        label="Terminal Output",
        content=output[:max_chars],
    )
    return TERMINAL_KEY, item


__all__ = [
    "TERMINAL_KEY",
    "TERMINAL_MAX_CHARS",
    "file_item",
    "selection_item",
    "symbol_item",
    "terminal_item",
]
