"""In-memory key-value storage.

Data is lost when the process exits. Suitable for tests.
"""

from .base import KeyValueStorage


class InMemoryStorage(KeyValueStorage):
    """Dict-backed storage."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    @property
    def backend_type(self) -> str:
        return "memory"
