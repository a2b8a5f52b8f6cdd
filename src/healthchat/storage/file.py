"""JSON file key-value storage.

All keys live in a single JSON object on disk. Writes go to a temporary
file that replaces the original, so a crash never leaves a half-written file.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from ..errors import StoreAccessError
from .base import KeyValueStorage

logger = logging.getLogger(__name__)


class JsonFileStorage(KeyValueStorage):
    """File-backed storage persisting across runs."""

    def __init__(self, path: str | Path = "~/.healthchat/storage.json"):
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreAccessError(f"Cannot read {self._path}: {e}") from e

        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StoreAccessError(f"Corrupt storage file {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise StoreAccessError(f"Corrupt storage file {self._path}: expected an object")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=".storage-", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StoreAccessError(f"Cannot write {self._path}: {e}") from e

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)
        logger.debug("Stored %s (%d chars) in %s", key, len(value), self._path)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)

    @property
    def backend_type(self) -> str:
        return "file"
