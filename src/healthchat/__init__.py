"""
healthchat: structured chat exchange for a consumer health assistant.

Each subpackage hides one design decision: where completions come from
(gateway), how replies are displayed (answers), where history lives
(history, storage) and how a turn proceeds (session).
"""

__version__ = "0.1.0"

from .answers import StructuredAnswer, format_response
from .errors import GatewayError, HealthChatError, StoreAccessError
from .gateway import CompletionGateway, GatewayContext, Language, create_gateway
from .history import (
    Conversation,
    ConversationStore,
    HistoryLog,
    Message,
    create_conversation_store,
)
from .preferences import Preferences
from .session import ConversationSession, TurnState

__all__ = [
    "CompletionGateway",
    "Conversation",
    "ConversationSession",
    "ConversationStore",
    "GatewayContext",
    "GatewayError",
    "HealthChatError",
    "HistoryLog",
    "Language",
    "Message",
    "Preferences",
    "StoreAccessError",
    "StructuredAnswer",
    "TurnState",
    "create_conversation_store",
    "create_gateway",
    "format_response",
]
