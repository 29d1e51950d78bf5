from __future__ import annotations

"""Undo/redo snapshot management for the editable surface.

This service is UI-agnostic and performs pure in-memory history tracking of
the surface markup. It stores the serialized markup in snapshots and can
restore previous states into a provided surface.

Design principles
-----------------
- No UI imports and no I/O (filesystem/console).
- Snapshots are immutable strings once stored.
- Redo stack is cleared on every new snapshot push (standard undo/redo behavior).
- Memory usage controlled by a max_history policy (trim oldest).
- Pushing a snapshot identical to the current top is a no-op, so callers can
  record before/after snapshots around every edit without creating empty
  undo steps.

Notes
-----
The selection is not part of a snapshot: restored markup is a fresh tree, so
the caret is placed at the end of the surface after undo/redo.
"""

from dataclasses import dataclass
from typing import List, Optional
import logging

from scribe_toolkit.core.exceptions import FragmentParseError
from scribe_toolkit.core.models.selection import Selection
from scribe_toolkit.core.models.surface import EditableSurface

logger = logging.getLogger(__name__)

__all__ = ["UndoService"]


@dataclass(frozen=True)
class _Snapshot:
    """Immutable in-memory snapshot of the surface markup."""

    markup: str


class UndoService:
    """Manage undo/redo stacks for an :class:`EditableSurface`.

    Parameters
    ----------
    max_history : int, default=50
        Maximum number of undo snapshots to keep. Oldest entries are discarded
        when the capacity is exceeded. Must be >= 1; if passed lower, it will be
        coerced to 1.

    Examples
    --------
    >>> surface = EditableSurface("<p>a</p>")
    >>> svc = UndoService(max_history=10)
    >>> svc.push_snapshot(surface)        # baseline
    >>> # ... mutate surface ...
    >>> svc.push_snapshot(surface)        # post
    >>> changed = svc.undo(surface)       # restores the baseline
    """

    def __init__(self, max_history: int = 50) -> None:
        self._max_history: int = max(1, int(max_history))
        self._undo_stack: List[_Snapshot] = []
        self._redo_stack: List[_Snapshot] = []

    # --------------------------------------------------------------------- API

    def push_snapshot(self, surface: EditableSurface) -> None:
        """Capture the current markup and push it onto the undo stack.

        The redo stack is cleared to follow standard undo/redo semantics
        whenever a new state is recorded.
        """
        snap = _Snapshot(surface.inner_html)
        if self._undo_stack and self._undo_stack[-1] == snap:
            return
        self._undo_stack.append(snap)
        self._redo_stack.clear()
        self._trim(self._undo_stack)

    def undo(self, surface: EditableSurface) -> bool:
        """Restore the previous state into the provided surface.

        Semantics (baseline-oriented):
        - Assumes callers push a snapshot BEFORE mutation (baseline) and AFTER mutation (post).
        - Undo restores the previous snapshot (baseline) and moves the post snapshot to redo.
        """
        if len(self._undo_stack) < 2:
            return False

        post_snap = self._undo_stack.pop()
        baseline_snap = self._undo_stack[-1]

        if not self._restore(surface, baseline_snap):
            self._undo_stack.append(post_snap)
            return False

        self._redo_stack.append(post_snap)
        self._trim(self._redo_stack)
        logger.debug("Undo OK: depth=%d", len(self._undo_stack))
        return True

    def redo(self, surface: EditableSurface) -> bool:
        """Re-apply a state that was previously undone."""
        if not self._redo_stack:
            return False

        post_snap = self._redo_stack.pop()
        if not self._restore(surface, post_snap):
            self._redo_stack.append(post_snap)
            return False

        self._undo_stack.append(post_snap)
        self._trim(self._undo_stack)
        logger.debug("Redo OK: depth=%d", len(self._undo_stack))
        return True

    def can_undo(self) -> bool:
        """Return True if an undo operation is currently possible."""
        return len(self._undo_stack) > 1

    def can_redo(self) -> bool:
        """Return True if a redo operation is currently possible."""
        return bool(self._redo_stack)

    def clear(self) -> None:
        """Clear both undo and redo histories."""
        self._undo_stack.clear()
        self._redo_stack.clear()

    # --------------------------------------------------------------- Internals

    def _trim(self, stack: List[_Snapshot]) -> None:
        overflow = len(stack) - self._max_history
        if overflow > 0:
            del stack[0:overflow]

    def _restore(self, surface: EditableSurface, snap: _Snapshot) -> bool:
        try:
            surface.load_markup(snap.markup)
        except FragmentParseError:
            logger.error("Undo FAIL: snapshot could not be restored", exc_info=True)
            return False
        surface.set_selection(Selection.caret(surface.end_point()))
        return True
