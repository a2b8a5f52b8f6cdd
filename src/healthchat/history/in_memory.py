"""In-memory conversation store.

History lives in process memory and is lost when the app exits.
Suitable for tests and throwaway sessions.
"""

import logging

from ..config import HISTORY_MAX_ENTRIES
from .base import ConversationStore
from .models import Conversation, HistoryLog

logger = logging.getLogger(__name__)


class InMemoryConversationStore(ConversationStore):
    """Conversation store backed by a HistoryLog held in memory."""

    def __init__(self, max_entries: int = HISTORY_MAX_ENTRIES):
        self._log = HistoryLog(max_entries=max_entries)

    def save(self, conversation: Conversation) -> None:
        if not conversation.is_persistable:
            logger.debug("Skipping save of greeting-only conversation %s", conversation.id)
            return
        self._log.upsert(conversation)

    def list(self) -> list[Conversation]:
        return list(self._log.entries)

    def delete(self, conversation_id: str) -> None:
        self._log.remove(conversation_id)

    def load(self, conversation_id: str) -> Conversation | None:
        return self._log.get(conversation_id)

    @property
    def backend_type(self) -> str:
        return "memory"
