from __future__ import annotations

"""Save and restore the surface markup through a key-value store.

The whole document is one string under a single fixed key. Loading replaces
the surface markup verbatim; nothing is sanitized or migrated.
"""

import logging
from typing import Callable, Optional

from scribe_toolkit.core.exceptions import FragmentParseError, StorageError
from scribe_toolkit.core.models.results import OperationResult
from scribe_toolkit.core.models.surface import EditableSurface
from scribe_toolkit.core.storage import KeyValueStore

__all__ = ["PersistenceService", "DEFAULT_STORAGE_KEY", "SAVED_MESSAGE"]

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "editorContent"
SAVED_MESSAGE = "Content saved!"

Notifier = Callable[[str], None]


class PersistenceService:
    """Persistence adapter for a single editor document.

    Parameters
    ----------
    store : KeyValueStore
        Backing store exposing ``get_item``/``set_item``.
    key : str, optional
        Storage key; defaults to ``"editorContent"``.
    notifier : callable, optional
        Called with the confirmation message after a successful save (the
        GUI shows it to the user).
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: Optional[str] = None,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self._store = store
        self._key = key or DEFAULT_STORAGE_KEY
        self._notifier = notifier

    @property
    def key(self) -> str:
        return self._key

    def save(self, surface: EditableSurface) -> OperationResult:
        """Write the serialized surface under the storage key."""
        markup = surface.inner_html
        try:
            self._store.set_item(self._key, markup)
        except StorageError as exc:
            logger.error("Save FAIL: key=%s: %s", self._key, exc)
            return OperationResult(False, f"Could not save content: {exc}", {"key": self._key, "reason": "storage_error"})
        logger.info("Save OK: key=%s len=%d", self._key, len(markup))
        if self._notifier is not None:
            self._notifier(SAVED_MESSAGE)
        return OperationResult(True, SAVED_MESSAGE, {"key": self._key, "length": len(markup)})

    def load(self, surface: EditableSurface) -> OperationResult:
        """Replace the surface markup with the stored document, if any.

        An absent key leaves the surface untouched and is still a success.
        """
        try:
            markup = self._store.get_item(self._key)
        except StorageError as exc:
            logger.error("Load FAIL: key=%s: %s", self._key, exc)
            return OperationResult(False, f"Could not load content: {exc}", {"key": self._key, "reason": "storage_error"})
        if markup is None:
            logger.info("Load: nothing stored under key=%s", self._key)
            return OperationResult(True, "No saved content.", {"key": self._key, "loaded": False})
        try:
            surface.load_markup(markup)
        except FragmentParseError as exc:
            logger.error("Load FAIL: stored markup unparsable: %s", exc)
            return OperationResult(False, "Saved content could not be parsed.", {"key": self._key, "reason": "parse_error"})
        logger.info("Load OK: key=%s len=%d", self._key, len(markup))
        return OperationResult(True, "Content loaded.", {"key": self._key, "loaded": True, "length": len(markup)})

    def clear(self) -> OperationResult:
        """Remove the stored document."""
        try:
            self._store.remove_item(self._key)
        except StorageError as exc:
            logger.error("Clear FAIL: key=%s: %s", self._key, exc)
            return OperationResult(False, f"Could not clear content: {exc}", {"key": self._key, "reason": "storage_error"})
        logger.info("Clear OK: key=%s", self._key)
        return OperationResult(True, "Saved content cleared.", {"key": self._key})
