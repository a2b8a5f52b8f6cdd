"""Conversation history module for healthchat.

Keeps a bounded, newest-first log of past conversations.
"""

from .base import ConversationStore
from .factory import create_conversation_store
from .in_memory import InMemoryConversationStore
from .local import LocalConversationStore
from .models import Conversation, HistoryLog, Message, make_preview, new_conversation_id

__all__ = [
    "Conversation",
    "ConversationStore",
    "HistoryLog",
    "InMemoryConversationStore",
    "LocalConversationStore",
    "Message",
    "create_conversation_store",
    "make_preview",
    "new_conversation_id",
]
