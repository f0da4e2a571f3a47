from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from arena_chat.models.messages import ConversationMessage, utc_now


def export_markdown(
    messages: Iterable[ConversationMessage],
    *,
    exported_at: datetime | None = None,
) -> str:
    """Render a transcript as Markdown, one section per message, in local time."""
    exported_at = exported_at or utc_now()
    markdown = "# Chat Conversation\n\n"
    markdown += f"Date: {exported_at.astimezone():%Y-%m-%d %H:%M:%S}\n\n"

    for message in messages:
        role = message.role.value.capitalize()
        model = f" ({message.model})" if message.model else ""
        timestamp = f"{message.timestamp.astimezone():%H:%M:%S}"
        markdown += f"## {role}{model} - {timestamp}\n\n"
        markdown += f"{message.content}\n\n"
        markdown += "---\n\n"

    return markdown


__all__ = ["export_markdown"]
