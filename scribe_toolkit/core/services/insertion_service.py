from __future__ import annotations

"""Cursor-aware fragment insertion.

This service splices serialized markup into the editable surface at the
current caret/selection, replacing any selected content, and leaves the caret
immediately after the inserted nodes so that typing and further commands
continue from there.

Scope and guarantees:
- Focus is forced onto the surface before the selection is read.
- No active selection makes the call a no-op (``success=False``), never an
  exception.
- The fragment is parsed before the tree is touched, so a parse failure
  leaves the surface exactly as it was.
- Deletion is exact to the selected range; nodes outside it are neither
  dropped, duplicated nor reordered.
- Listeners of the surface are notified once, after the whole operation.

Examples
--------
Basic usage:

    service = FragmentInsertionService()
    result = service.insert_fragment(surface, build_table(2, 2))
    if result.success:
        caret = result.selection
"""

from dataclasses import dataclass
import logging
from typing import Any, Dict, Optional

from scribe_toolkit.core.exceptions import FragmentParseError, NoSelectionError
from scribe_toolkit.core.models.selection import Selection
from scribe_toolkit.core.models.surface import EditableSurface
from scribe_toolkit.core.parser.html_fragment import parse_fragment
from scribe_toolkit.core.ranges import delete_contents, insert_nodes, insert_text
from scribe_toolkit.core.services.selection_service import current_selection
from scribe_toolkit.core.utils import xml_safe

__all__ = ["InsertionResult", "FragmentInsertionService"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InsertionResult:
    """Result of an insertion.

    Attributes
    ----------
    success
        Whether the surface was edited (an empty fragment still counts).
    message
        Human-readable summary suitable for logs or UI display.
    selection
        The host selection after the call: a caret after the inserted nodes,
        the collapsed deletion point, or the unchanged prior selection.
    inserted
        Number of top-level nodes inserted.
    details
        Optional structured details for diagnostics or caller logic.
    """

    success: bool
    message: str
    selection: Optional[Selection]
    inserted: int = 0
    details: Optional[Dict[str, Any]] = None


class FragmentInsertionService:
    """Inserts markup fragments and typed text at the host selection."""

    def insert_fragment(self, surface: EditableSurface, markup: str) -> InsertionResult:
        """Replace the selection with the nodes of *markup*.

        Returns an :class:`InsertionResult` whose ``selection`` is a caret
        right after the last inserted node; for an empty fragment it is the
        caret at the point where the deleted content used to be.
        """
        logger.info("Edit: insert_fragment len=%d", len(markup) if isinstance(markup, str) else -1)
        surface.focus()
        try:
            selection = current_selection(surface)
        except NoSelectionError:
            logger.info("Edit noop: insert_fragment no_selection")
            return InsertionResult(
                False,
                "No active selection; insertion skipped.",
                surface.get_selection(),
                details={"reason": "no_selection"},
            )

        try:
            nodes = parse_fragment(markup)
        except FragmentParseError as exc:
            logger.warning("Edit FAIL: insert_fragment unparsable markup: %s", exc)
            return InsertionResult(
                False,
                "Fragment could not be parsed; nothing inserted.",
                selection,
                details={"reason": "parse_error", "error": str(exc)},
            )

        if selection.is_caret:
            point = selection.start
        else:
            point = delete_contents(selection.start, selection.end)

        if not nodes:
            caret = Selection.caret(point)
            surface.set_selection(caret)
            if not selection.is_caret:
                surface.notify_changed()
            logger.info("Edit OK: insert_fragment empty fragment, %s", caret.describe())
            return InsertionResult(True, "Empty fragment; selection collapsed.", caret)

        after = insert_nodes(point, nodes)
        caret = Selection.caret(after)
        surface.set_selection(caret)
        surface.notify_changed()
        logger.info("Edit OK: insert_fragment nodes=%d %s", len(nodes), caret.describe())
        return InsertionResult(True, f"Inserted {len(nodes)} node(s).", caret, inserted=len(nodes))

    def insert_text(self, surface: EditableSurface, text: str) -> InsertionResult:
        """Type *text* at the selection, replacing a ranged selection first.

        Control characters that markup cannot carry are dropped before the
        tree is touched.
        """
        clean = xml_safe(text)
        if clean != text:
            logger.info("Edit: insert_text dropped %d control character(s)", len(text) - len(clean))
            text = clean
        surface.focus()
        try:
            selection = current_selection(surface)
        except NoSelectionError:
            logger.debug("Edit noop: insert_text no_selection")
            return InsertionResult(
                False,
                "No active selection; typing ignored.",
                None,
                details={"reason": "no_selection"},
            )

        point = selection.start if selection.is_caret else delete_contents(selection.start, selection.end)
        if text:
            point = insert_text(point, text)
        caret = Selection.caret(point)
        surface.set_selection(caret)
        surface.notify_changed()
        return InsertionResult(True, f"Typed {len(text)} character(s).", caret)
