"""Keyed, ordered store of context items with a budgeted serializer."""

from __future__ import annotations

import logging
from typing import assert_never

from arena_chat.context.items import (
    TERMINAL_MAX_CHARS,
    file_item,
    selection_item,
    symbol_item,
    terminal_item,
)
from arena_chat.models.context import ContextItem, ContextKind

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHARS = 10_000


def render_block(item: ContextItem) -> str:
    language = item.language or ""
    content = item.content or ""
    description = item.description or ""
    match item.kind:
        case ContextKind.file:
            return f"\n## File: {description}\n```{language}\n{content}\n```\n"
        case ContextKind.selection:
            return f"\n## {item.label}\n{description}\n```{language}\n{content}\n```\n"
        case ContextKind.symbol:
            return f"\n## {description}\n```{language}\n{content}\n```\n"
        case ContextKind.terminal:
            return f"\n## Terminal Output\n```\n{content}\n```\n"
        case _:
            assert_never(item.kind)


class ContextStore:
    """Context items keyed by string, iterated in first-insertion order.

    Replacing an existing key keeps its position; only new keys are appended.
    Two truncation stages apply: terminal output is capped when it is ingested,
    and :meth:`serialize` enforces a global character budget over all blocks.
    """

    def __init__(
        self,
        max_chars: int = DEFAULT_MAX_CHARS,
        *,
        terminal_max_chars: int = TERMINAL_MAX_CHARS,
    ) -> None:
        if max_chars <= 0:
            raise ValueError("max_chars must be positive")
        if terminal_max_chars <= 0:
            raise ValueError("terminal_max_chars must be positive")
        self.max_chars = max_chars
        self.terminal_max_chars = terminal_max_chars
        # dict preserves first-insertion order and keeps it on reassignment.
        self._items: dict[str, ContextItem] = {}

    def put(self, key: str, item: ContextItem) -> None:
        if not key:
            raise ValueError("context key must be non-empty")
        self._items[key] = item.model_copy(deep=True)

    def remove(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()

    def get(self, key: str) -> ContextItem | None:
        return self._items.get(key)

    def entries(self) -> list[tuple[str, ContextItem]]:
        return list(self._items.items())

    def items(self) -> list[ContextItem]:
        return list(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def serialize(self, max_chars: int | None = None) -> str:
        """Render items in order, stopping at the first block over budget.

        Later items are never considered once one block does not fit, even if
        they are small enough on their own.
        """
        budget = self.max_chars if max_chars is None else max_chars
        blocks: list[str] = []
        used = 0
        for index, (key, item) in enumerate(self._items.items()):
            block = render_block(item)
            if used + len(block) > budget:
                logger.debug(
                    "Context budget reached at key=%s: kept %d of %d items (%d/%d chars)",
                    key,
                    index,
                    len(self._items),
                    used,
                    budget,
                )
                break
            blocks.append(block)
            used += len(block)
        return "".join(blocks)

    # ------------------------------------------------------------------
    # Ingestion helpers
    # ------------------------------------------------------------------

    def add_file(
        self,
        uri: str,
        content: str,
        *,
        relative_path: str | None = None,
        language: str | None = None,
    ) -> str:
        key, item = file_item(uri, content, relative_path=relative_path, language=language)
        self.put(key, item)
        return key

    def add_selection(
        self,
        uri: str,
        content: str,
        *,
        start_line: int,
        end_line: int,
        relative_path: str | None = None,
        language: str | None = None,
    ) -> str | None:
        if not content:
            return None
        key, item = selection_item(
            uri,
            content,
            start_line=start_line,
            end_line=end_line,
            relative_path=relative_path,
            language=language,
        )
        self.put(key, item)
        return key

    def add_symbol(
        self,
        uri: str,
        name: str,
        content: str,
        *,
        symbol_kind: str,
        relative_path: str | None = None,
        language: str | None = None,
    ) -> str:
        key, item = symbol_item(
            uri,
            name,
            content,
            symbol_kind=symbol_kind,
            relative_path=relative_path,
            language=language,
        )
        self.put(key, item)
        return key

    def add_terminal_output(self, output: str) -> str:
        key, item = terminal_item(output, max_chars=self.terminal_max_chars)
        self.put(key, item)
        return key


__all__ = ["DEFAULT_MAX_CHARS", "ContextStore", "render_block"]
