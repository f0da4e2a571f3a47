from arena_chat.conversation.export import export_markdown
from arena_chat.conversation.manager import ConversationManager

__all__ = ["ConversationManager", "export_markdown"]
