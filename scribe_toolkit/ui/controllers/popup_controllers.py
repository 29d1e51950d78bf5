from __future__ import annotations

"""Controllers for the table, image and link insert popups.

Each popup follows the same small state machine::

    CLOSED --open()--> OPEN --submit()/cancel()--> CLOSED

Field edits are validated as they arrive (table sizes are clamped, image
height is ignored while the aspect ratio is locked). Submitting builds the
fragment and hands it to the insert callback; a blank URL turns a submit into
a cancel. Every form is reset when it closes.

No UI toolkit code lives here; widgets call these methods and read
:attr:`form` to render the fields.
"""

from enum import Enum
import logging
from typing import Any, Callable

from scribe_toolkit.core.exceptions import InvalidFieldValue
from scribe_toolkit.core.generators.fragment_builder import (
    TABLE_MAX,
    TABLE_MIN,
    build_image,
    build_link,
    build_table,
)
from scribe_toolkit.core.models.forms import ImageFormState, LinkFormState, TableFormState
from scribe_toolkit.core.models.results import OperationResult
from scribe_toolkit.core.utils import clamp_dimension

__all__ = [
    "PopupState",
    "PopupOutcome",
    "TablePopupController",
    "ImagePopupController",
    "LinkPopupController",
]

logger = logging.getLogger(__name__)

InsertCallback = Callable[[str], Any]

_TRUE_STRINGS = {"1", "true", "yes", "on", "checked"}


class PopupState(Enum):
    CLOSED = "closed"
    OPEN = "open"


class PopupOutcome(Enum):
    """How the popup was last closed."""

    NONE = "none"
    SUBMITTED = "submitted"
    CANCELLED = "cancelled"


def _as_bool(raw: object) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in _TRUE_STRINGS
    return bool(raw)


class _PopupController:
    """Shared open/cancel/outcome handling."""

    name = "popup"

    def __init__(self, insert: InsertCallback) -> None:
        self._insert = insert
        self.form = self._new_form()
        self.outcome = PopupOutcome.NONE

    def _new_form(self):
        raise NotImplementedError

    @property
    def state(self) -> PopupState:
        return PopupState.OPEN if self.form.visible else PopupState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.form.visible

    def open(self) -> None:
        self.form.visible = True
        self.outcome = PopupOutcome.NONE
        logger.debug("Popup open: %s", self.name)

    def cancel(self) -> OperationResult:
        self._close(PopupOutcome.CANCELLED)
        return OperationResult(False, f"{self.name.capitalize()} insertion cancelled.", {"popup": self.name, "reason": "cancelled"})

    def set_field(self, name: str, raw: object) -> bool:
        """Store a field edit; returns False when the edit was ignored."""
        if not self.form.visible:
            logger.debug("Popup %s: edit of %s ignored while closed", self.name, name)
            return False
        handler = getattr(self, f"_set_{name}", None)
        if handler is None:
            raise KeyError(f"Unknown {self.name} field: {name}")
        return handler(raw)

    def submit(self) -> OperationResult:
        if not self.form.visible:
            return OperationResult(False, f"{self.name.capitalize()} popup is not open.", {"popup": self.name, "reason": "closed"})
        return self._submit()

    def _submit(self) -> OperationResult:
        raise NotImplementedError

    def _insert_markup(self, markup: str) -> OperationResult:
        result = self._insert(markup)
        self._close(PopupOutcome.SUBMITTED)
        success = bool(getattr(result, "success", True))
        message = getattr(result, "message", "") or f"{self.name.capitalize()} inserted."
        logger.info("Popup %s submitted: success=%s", self.name, success)
        return OperationResult(success, message, {"popup": self.name, "markup": markup})

    def _close(self, outcome: PopupOutcome) -> None:
        self.form.reset()
        self.outcome = outcome


class TablePopupController(_PopupController):
    """Rows/columns popup; both fields are clamped on every edit."""

    name = "table"

    def __init__(
        self,
        insert: InsertCallback,
        lower: int = TABLE_MIN,
        upper: int = TABLE_MAX,
        fallback: int = 3,
    ) -> None:
        self._lower = lower
        self._upper = upper
        self._fallback = fallback
        super().__init__(insert)

    def _new_form(self) -> TableFormState:
        return TableFormState()

    def _clamp(self, raw: object) -> int:
        return clamp_dimension(raw, self._lower, self._upper, self._fallback)

    def _set_rows(self, raw: object) -> bool:
        self.form.rows = self._clamp(raw)
        return True

    def _set_cols(self, raw: object) -> bool:
        self.form.cols = self._clamp(raw)
        return True

    def _submit(self) -> OperationResult:
        try:
            markup = build_table(self.form.rows, self.form.cols)
        except InvalidFieldValue as exc:
            # Bounds configured wider than the builder allows
            logger.warning("Popup table: %s", exc)
            self._close(PopupOutcome.CANCELLED)
            return OperationResult(False, str(exc), {"popup": self.name, "reason": "invalid_field"})
        return self._insert_markup(markup)


class ImagePopupController(_PopupController):
    """Image URL and size popup."""

    name = "image"

    def __init__(self, insert: InsertCallback, keep_aspect: bool = True) -> None:
        self._keep_aspect = keep_aspect
        super().__init__(insert)

    def _new_form(self) -> ImageFormState:
        return ImageFormState(keep_aspect=self._keep_aspect)

    def _close(self, outcome: PopupOutcome) -> None:
        super()._close(outcome)
        self.form.keep_aspect = self._keep_aspect

    def _set_url(self, raw: object) -> bool:
        self.form.url = "" if raw is None else str(raw)
        return True

    def _set_width(self, raw: object) -> bool:
        self.form.width = "" if raw is None else str(raw)
        return True

    def _set_height(self, raw: object) -> bool:
        if self.form.keep_aspect:
            return False
        self.form.height = "" if raw is None else str(raw)
        return True

    def _set_keep_aspect(self, raw: object) -> bool:
        self.form.keep_aspect = _as_bool(raw)
        return True

    def _submit(self) -> OperationResult:
        form = self.form
        if not form.url.strip():
            logger.info("Popup image: blank url, treated as cancel")
            return self.cancel()
        markup = build_image(form.url, form.width, form.height, form.keep_aspect)
        return self._insert_markup(markup)


class LinkPopupController(_PopupController):
    """Link URL and label popup."""

    name = "link"

    def _new_form(self) -> LinkFormState:
        return LinkFormState()

    def _set_url(self, raw: object) -> bool:
        self.form.url = "" if raw is None else str(raw)
        return True

    def _set_text(self, raw: object) -> bool:
        self.form.text = "" if raw is None else str(raw)
        return True

    def _submit(self) -> OperationResult:
        form = self.form
        if not form.url.strip():
            logger.info("Popup link: blank url, treated as cancel")
            return self.cancel()
        markup = build_link(form.url, form.text or None)
        return self._insert_markup(markup)
