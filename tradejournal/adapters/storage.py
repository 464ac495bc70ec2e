"""
Key-value storage backends for the persisted journal.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

__all__ = ["KeyValueStorage", "JsonFileStorage", "MemoryStorage"]

log = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Minimal string key-value store, shaped like browser localStorage."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStorage:
    """Dict-backed storage for tests and scripting."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStorage:
    """
    Stores all keys in a single JSON object on disk.

    Every `set` rewrites the whole file through a temporary file in the same
    directory followed by an atomic rename.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.is_file():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            log.warning(f"Storage file {self.path} is not valid JSON, treating it as empty: {e}")
            return {}
        if not isinstance(data, dict):
            log.warning(f"Storage file {self.path} does not hold a JSON object, treating it as empty.")
            return {}
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    # impure
    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        log.debug(f"Wrote key '{key}' to {self.path}")
