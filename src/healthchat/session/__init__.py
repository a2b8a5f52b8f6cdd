"""Conversation session module: the turn state machine."""

from .session import ConversationSession
from .states import TurnState

__all__ = ["ConversationSession", "TurnState"]
