"""Abstract base class for key-value storage backends.

The abstraction hides:
- Where values live (process memory, a file on disk)
- Serialization of the key space
"""

from abc import ABC, abstractmethod


class KeyValueStorage(ABC):
    """String-to-string storage.

    Every operation is atomic from the caller's point of view.
    Implementations raise StoreAccessError when the backing medium
    cannot be read or written.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value stored under key, or None."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove key. Removing an absent key is a no-op."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
