"""User preferences kept in local storage.

Hides the storage keys and default values for the assistant display
name and the response language.
"""

import logging

from .config import BOT_NAME_KEY, DEFAULT_BOT_NAME, LANGUAGE_KEY
from .errors import StoreAccessError
from .gateway.models import Language
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)


class Preferences:
    """Assistant display name and response language.

    Reads fall back to defaults when storage is unavailable;
    writes propagate StoreAccessError so the caller can report it.
    """

    def __init__(self, storage: KeyValueStorage):
        self._storage = storage

    def _read(self, key: str) -> str | None:
        try:
            return self._storage.get(key)
        except StoreAccessError as e:
            logger.warning("Preference %s unavailable: %s", key, e)
            return None

    @property
    def bot_name(self) -> str:
        return self._read(BOT_NAME_KEY) or DEFAULT_BOT_NAME

    @bot_name.setter
    def bot_name(self, name: str) -> None:
        name = name.strip()
        if not name:
            raise ValueError("Chatbot name cannot be empty")
        self._storage.set(BOT_NAME_KEY, name)

    @property
    def language(self) -> Language:
        stored = self._read(LANGUAGE_KEY)
        if stored:
            try:
                return Language(stored)
            except ValueError:
                logger.debug("Ignoring unsupported stored language %r", stored)
        return Language.EN

    @language.setter
    def language(self, language: Language | str) -> None:
        self._storage.set(LANGUAGE_KEY, Language(language).value)
