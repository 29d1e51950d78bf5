from __future__ import annotations

"""Key-value stores backing editor persistence.

Two implementations are provided:

- :class:`MemoryStore` keeps values in a dict for the lifetime of the object
  (tests, embedding).
- :class:`JsonFileStore` keeps all keys in a single JSON document on disk,
  written atomically through a temporary file in the same directory.

Public API:
- get_default_store() -> process-wide :class:`JsonFileStore` configured from
  ``editor.yml`` (``storage.filename``) under the user data directory.
"""

from pathlib import Path
from typing import Dict, Optional, Protocol
import json
import logging
import os
import tempfile

from scribe_toolkit.core.exceptions import StorageError

__all__ = ["KeyValueStore", "MemoryStore", "JsonFileStore", "get_default_store", "reset_default_store"]

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal string-to-string store interface."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStore:
    """In-process store; nothing survives the object."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove_item(self, key: str) -> None:
        self._values.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._values


class JsonFileStore:
    """Store keeping every key in one JSON object on disk.

    The file is read on every access so that several editor processes see
    each other's saves; writes replace the file atomically.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get_item(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data, key)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data, key)

    def _read(self) -> Dict[str, object]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as exc:
            raise StorageError(f"Could not read store {self._path}", cause=exc) from exc
        if not isinstance(data, dict):
            raise StorageError(f"Store {self._path} does not hold a JSON object")
        return data

    def _write(self, data: Dict[str, object], key: str) -> None:
        tmp_name = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".store_", suffix=".json", dir=str(self._path.parent))
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as exc:
            raise StorageError(f"Could not write store {self._path}", key=key, cause=exc) from exc
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
        logger.debug("Store written: %s (%d key(s))", self._path, len(data))


_DEFAULT_STORE: Optional[JsonFileStore] = None


def get_default_store() -> JsonFileStore:
    """Return the process-wide file store, creating it on first use."""
    global _DEFAULT_STORE
    if _DEFAULT_STORE is None:
        from scribe_toolkit.config import ConfigManager, get_user_data_dir

        storage_cfg = ConfigManager().get_editor_config().get("storage", {}) or {}
        filename = storage_cfg.get("filename") or "editor_store.json"
        _DEFAULT_STORE = JsonFileStore(get_user_data_dir() / filename)
        logger.info("Default store: %s", _DEFAULT_STORE.path)
    return _DEFAULT_STORE


def reset_default_store() -> None:
    """Forget the cached default store (used when the data directory changes)."""
    global _DEFAULT_STORE
    _DEFAULT_STORE = None
