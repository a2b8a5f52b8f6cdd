"""Local key-value storage module.

Plays the role of the browser's local storage: string values under string
keys, private to one user profile.
"""

from .base import KeyValueStorage
from .factory import create_key_value_storage
from .file import JsonFileStorage
from .memory import InMemoryStorage

__all__ = [
    "KeyValueStorage",
    "InMemoryStorage",
    "JsonFileStorage",
    "create_key_value_storage",
]
