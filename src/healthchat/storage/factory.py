"""Factory for creating key-value storage backends."""

from typing import Any

from .base import KeyValueStorage


def create_key_value_storage(
    backend: str = "memory",
    **kwargs: Any
) -> KeyValueStorage:
    """Create a key-value storage backend.

    Args:
        backend: Backend type ("memory" or "file")
        **kwargs: Backend-specific configuration
            For file:
                - path: str | Path (default: ~/.healthchat/storage.json)

    Returns:
        KeyValueStorage instance

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "memory":
        from .memory import InMemoryStorage
        return InMemoryStorage(**kwargs)

    elif backend == "file":
        from .file import JsonFileStorage
        return JsonFileStorage(**kwargs)

    raise ValueError(
        f"Unsupported storage backend: {backend}. "
        f"Supported backends: memory, file"
    )
