"""Conversation store persisted in local key-value storage.

The whole history log is serialized as a JSON array under a single key,
mirroring how the browser client keeps ``chatHistory``. Persistence is
best-effort: a failed write is logged and the conversation carries on in
memory.
"""

import logging

from pydantic import ValidationError

from ..config import CHAT_HISTORY_KEY, HISTORY_MAX_ENTRIES
from ..errors import StoreAccessError
from ..storage import KeyValueStorage
from .base import ConversationStore
from .models import Conversation, HistoryLog

logger = logging.getLogger(__name__)


class LocalConversationStore(ConversationStore):
    """Conversation store over a KeyValueStorage."""

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = CHAT_HISTORY_KEY,
        max_entries: int = HISTORY_MAX_ENTRIES,
    ):
        self._storage = storage
        self._key = key
        self._max_entries = max_entries

    def _read_log(self) -> HistoryLog:
        """Read the persisted log. Unreadable or corrupt history reads as empty."""
        try:
            raw = self._storage.get(self._key)
        except StoreAccessError as e:
            logger.warning("Chat history unavailable: %s", e)
            return HistoryLog(max_entries=self._max_entries)

        if not raw:
            return HistoryLog(max_entries=self._max_entries)

        try:
            return HistoryLog.from_json(raw, max_entries=self._max_entries)
        except ValidationError as e:
            logger.warning("Discarding unreadable chat history: %s", e.error_count())
            return HistoryLog(max_entries=self._max_entries)

    def _write_log(self, log: HistoryLog) -> None:
        try:
            self._storage.set(self._key, log.to_json())
        except StoreAccessError as e:
            logger.warning("Chat history not saved: %s", e)

    def save(self, conversation: Conversation) -> None:
        if not conversation.is_persistable:
            logger.debug("Skipping save of greeting-only conversation %s", conversation.id)
            return
        log = self._read_log()
        log.upsert(conversation)
        self._write_log(log)

    def list(self) -> list[Conversation]:
        return list(self._read_log().entries)

    def delete(self, conversation_id: str) -> None:
        log = self._read_log()
        if log.get(conversation_id) is None:
            return
        log.remove(conversation_id)
        self._write_log(log)

    def load(self, conversation_id: str) -> Conversation | None:
        return self._read_log().get(conversation_id)

    @property
    def backend_type(self) -> str:
        return "local"
