"""Data models for conversation history.

These models define messages, conversations and the bounded history log,
independent of the storage backend used.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from uuid_extensions import uuid7

from ..config import HISTORY_MAX_ENTRIES, IMAGE_PREVIEW, PREVIEW_MAX_LENGTH

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_conversation_id() -> str:
    """Generate a time-ordered conversation identifier."""
    return str(uuid7())


class Message(BaseModel):
    """A single chat message. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"] = Field(description="Who sent the message")
    content: str = Field(description="Message text as displayed")


def make_preview(messages: list[Message], limit: int = PREVIEW_MAX_LENGTH) -> str:
    """Derive a history preview from the first user message.

    Args:
        messages: Conversation messages in order
        limit: Maximum characters before truncating

    Returns:
        Whitespace-collapsed, truncated text of the first user message
    """
    for message in messages:
        if message.role != "user":
            continue
        text = " ".join(message.content.split())
        if not text:
            return IMAGE_PREVIEW
        return text[:limit] + "..." if len(text) > limit else text
    return ""


class Conversation(BaseModel):
    """A stored conversation.

    ``preview`` and ``created_at`` are fixed when the conversation is first
    persisted; later saves of the same id carry them over unchanged.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=new_conversation_id)
    created_at: datetime = Field(default_factory=_utcnow, alias="timestamp")
    preview: str = ""
    messages: list[Message] = Field(default_factory=list)

    @classmethod
    def from_messages(
        cls,
        messages: list[Message],
        conversation_id: str | None = None,
        created_at: datetime | None = None,
        preview: str | None = None,
    ) -> "Conversation":
        """Build a conversation, deriving any identity fields not supplied."""
        return cls(
            id=conversation_id or new_conversation_id(),
            created_at=created_at or _utcnow(),
            preview=preview if preview is not None else make_preview(messages),
            messages=list(messages),
        )

    @property
    def is_persistable(self) -> bool:
        """A greeting-only conversation is never stored."""
        return len(self.messages) > 1


_CONVERSATION_LIST = TypeAdapter(list[Conversation])
_RAW_LIST = TypeAdapter(list[Any])


class HistoryLog(BaseModel):
    """Bounded list of conversations, newest first."""

    entries: list[Conversation] = Field(default_factory=list)
    max_entries: int = Field(default=HISTORY_MAX_ENTRIES, ge=1)

    def upsert(self, conversation: Conversation) -> None:
        """Insert or replace a conversation and move it to the front.

        Evicts the oldest entries once the bound is exceeded.
        """
        self.entries = [c for c in self.entries if c.id != conversation.id]
        self.entries.insert(0, conversation)
        del self.entries[self.max_entries:]

    def remove(self, conversation_id: str) -> None:
        """Remove a conversation. Absent ids are ignored."""
        self.entries = [c for c in self.entries if c.id != conversation_id]

    def get(self, conversation_id: str) -> Conversation | None:
        for conversation in self.entries:
            if conversation.id == conversation_id:
                return conversation
        return None

    def to_json(self) -> str:
        """Serialize entries as a JSON array (the persisted form)."""
        return _CONVERSATION_LIST.dump_json(self.entries, by_alias=True).decode("utf-8")

    @classmethod
    def from_json(cls, raw: str, max_entries: int = HISTORY_MAX_ENTRIES) -> "HistoryLog":
        """Parse a persisted JSON array.

        Entries that fail validation are skipped; the rest are kept in order.

        Raises:
            pydantic.ValidationError: If the payload is not a JSON array
        """
        entries = []
        for position, item in enumerate(_RAW_LIST.validate_json(raw)):
            try:
                entries.append(Conversation.model_validate(item))
            except ValidationError as e:
                logger.warning("Skipping unreadable history entry %d: %d errors", position, e.error_count())
        return cls(entries=entries[:max_entries], max_entries=max_entries)

    def __len__(self) -> int:
        return len(self.entries)
