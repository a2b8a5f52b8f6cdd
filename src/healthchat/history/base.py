"""Abstract base class for conversation stores.

This module defines the interface for conversation history storage.
The abstraction hides:
- Where the history log is kept (memory, local key-value storage)
- Serialization format
- How persistence failures degrade
"""

from abc import ABC, abstractmethod

from .models import Conversation


class ConversationStore(ABC):
    """Owner of the bounded, newest-first history log.

    All operations are synchronous and atomic from the caller's
    point of view. Callers never mutate the log directly.
    """

    @abstractmethod
    def save(self, conversation: Conversation) -> None:
        """Upsert a conversation by id and move it to the front.

        Conversations with one message or fewer are ignored. The oldest
        entries are evicted once the bound is exceeded.
        """

    @abstractmethod
    def list(self) -> list[Conversation]:
        """Return stored conversations, newest first."""

    @abstractmethod
    def delete(self, conversation_id: str) -> None:
        """Delete a conversation. Deleting an absent id is a no-op."""

    @abstractmethod
    def load(self, conversation_id: str) -> Conversation | None:
        """Return a stored conversation, or None if absent."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
