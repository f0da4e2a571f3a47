"""Interactive front ends over a ConversationManager."""
