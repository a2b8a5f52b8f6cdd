"""Factory for creating conversation stores."""

from typing import Any

from .base import ConversationStore


def create_conversation_store(
    backend: str = "memory",
    **kwargs: Any
) -> ConversationStore:
    """Create a conversation store.

    Args:
        backend: Backend type ("memory" or "local")
        **kwargs: Backend-specific configuration
            For local:
                - storage: KeyValueStorage (required)
                - key: str (default: 'chatHistory')
            For both:
                - max_entries: int (default: 50)

    Returns:
        ConversationStore instance

    Raises:
        ValueError: If backend type is not supported
        TypeError: If required configuration is missing
    """
    if backend == "memory":
        from .in_memory import InMemoryConversationStore
        return InMemoryConversationStore(**kwargs)

    elif backend == "local":
        if "storage" not in kwargs:
            raise TypeError("Local conversation store requires 'storage' in config")
        from .local import LocalConversationStore
        return LocalConversationStore(**kwargs)

    raise ValueError(
        f"Unsupported history backend: {backend}. "
        f"Supported backends: memory, local"
    )
