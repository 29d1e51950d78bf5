from __future__ import annotations

"""Formatting command dispatch.

The editor exposes a closed set of formatting commands. The dispatcher
validates the command name, forces focus onto the surface, reads the
selection and hands the work to a :class:`FormattingBackend`, which owns the
actual tree edits. Failures are reported through :class:`OperationResult`
instead of raised, so toolbar handlers never have to guard the call.

``fontSize`` is applied in two steps: the selection is first set to a neutral
size and only then to the requested one, which normalises nested sizes left
by earlier edits.
"""

from abc import ABC, abstractmethod
from enum import Enum
import logging
from typing import Optional, Union

from scribe_toolkit.core.exceptions import NoSelectionError
from scribe_toolkit.core.models.results import OperationResult
from scribe_toolkit.core.models.selection import Selection
from scribe_toolkit.core.models.surface import EditableSurface
from scribe_toolkit.core.services.selection_service import current_selection

__all__ = ["Command", "FormattingBackend", "CommandDispatcher", "DEFAULT_NEUTRAL_FONT_SIZE"]

logger = logging.getLogger(__name__)

DEFAULT_NEUTRAL_FONT_SIZE = "7"


class Command(str, Enum):
    """Formatting commands understood by the editor."""

    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    STRIKE_THROUGH = "strikeThrough"
    JUSTIFY_LEFT = "justifyLeft"
    JUSTIFY_CENTER = "justifyCenter"
    JUSTIFY_RIGHT = "justifyRight"
    INSERT_ORDERED_LIST = "insertOrderedList"
    INSERT_UNORDERED_LIST = "insertUnorderedList"
    FORMAT_BLOCK = "formatBlock"
    SUBSCRIPT = "subscript"
    SUPERSCRIPT = "superscript"
    INSERT_HORIZONTAL_RULE = "insertHorizontalRule"
    UNDO = "undo"
    REDO = "redo"
    REMOVE_FORMAT = "removeFormat"
    FONT_NAME = "fontName"
    FORE_COLOR = "foreColor"
    HILITE_COLOR = "hiliteColor"
    FONT_SIZE = "fontSize"

    @classmethod
    def parse(cls, name: Union[str, "Command"]) -> "Command":
        """Resolve *name* to a command; matching ignores case.

        Raises ``ValueError`` for names outside the command set.
        """
        if isinstance(name, Command):
            return name
        if not isinstance(name, str):
            raise ValueError(f"Unsupported command: {name!r}")
        wanted = name.strip().lower()
        for command in cls:
            if command.value.lower() == wanted:
                return command
        raise ValueError(f"Unsupported command: {name!r}")

    @property
    def takes_value(self) -> bool:
        return self in _VALUE_COMMANDS

    @property
    def is_history(self) -> bool:
        return self in (Command.UNDO, Command.REDO)


_VALUE_COMMANDS = frozenset(
    {Command.FONT_NAME, Command.FORE_COLOR, Command.HILITE_COLOR, Command.FONT_SIZE}
)

_DEFAULT_BLOCK = "blockquote"

# Backend methods that go through the insertion engine, which notifies itself
_SELF_NOTIFYING = frozenset({Command.INSERT_HORIZONTAL_RULE})


class FormattingBackend(ABC):
    """Applies individual formatting commands to a surface.

    Every method receives the surface and the selection read by the
    dispatcher and returns ``True`` when the surface content changed.
    Implementations are responsible for leaving a valid selection behind.
    """

    @abstractmethod
    def bold(self, surface: EditableSurface, selection: Selection) -> bool: ...

    @abstractmethod
    def italic(self, surface: EditableSurface, selection: Selection) -> bool: ...

    @abstractmethod
    def underline(self, surface: EditableSurface, selection: Selection) -> bool: ...

    @abstractmethod
    def strike_through(self, surface: EditableSurface, selection: Selection) -> bool: ...

    @abstractmethod
    def subscript(self, surface: EditableSurface, selection: Selection) -> bool: ...

    @abstractmethod
    def superscript(self, surface: EditableSurface, selection: Selection) -> bool: ...

    @abstractmethod
    def justify(self, surface: EditableSurface, selection: Selection, align: str) -> bool: ...

    @abstractmethod
    def insert_list(self, surface: EditableSurface, selection: Selection, ordered: bool) -> bool: ...

    @abstractmethod
    def format_block(self, surface: EditableSurface, selection: Selection, tag: str) -> bool: ...

    @abstractmethod
    def insert_horizontal_rule(self, surface: EditableSurface, selection: Selection) -> bool: ...

    @abstractmethod
    def remove_format(self, surface: EditableSurface, selection: Selection) -> bool: ...

    @abstractmethod
    def font_name(self, surface: EditableSurface, selection: Selection, value: str) -> bool: ...

    @abstractmethod
    def fore_color(self, surface: EditableSurface, selection: Selection, value: str) -> bool: ...

    @abstractmethod
    def hilite_color(self, surface: EditableSurface, selection: Selection, value: str) -> bool: ...

    @abstractmethod
    def font_size(self, surface: EditableSurface, selection: Selection, value: str) -> bool: ...

    @abstractmethod
    def undo(self, surface: EditableSurface) -> bool: ...

    @abstractmethod
    def redo(self, surface: EditableSurface) -> bool: ...


class CommandDispatcher:
    """Routes :class:`Command` values to a :class:`FormattingBackend`.

    Parameters
    ----------
    backend : FormattingBackend
        Object performing the tree edits.
    neutral_font_size : str, optional
        Size applied before the requested one in ``fontSize``. Defaults to
        ``"7"``.
    """

    def __init__(self, backend: FormattingBackend, neutral_font_size: Optional[str] = None) -> None:
        self._backend = backend
        self._neutral_font_size = str(neutral_font_size or DEFAULT_NEUTRAL_FONT_SIZE)

    @property
    def backend(self) -> FormattingBackend:
        return self._backend

    def apply_command(
        self,
        surface: EditableSurface,
        command: Union[str, Command],
        value: Optional[str] = None,
    ) -> OperationResult:
        """Apply *command* to the current selection of *surface*.

        Returns
        -------
        OperationResult
            ``success`` is True when the surface changed. ``details`` carries
            the command name and, for no-ops, a ``reason``.
        """
        try:
            cmd = Command.parse(command)
        except ValueError:
            logger.warning("Edit FAIL: apply_command unsupported command=%r", command)
            return OperationResult(
                False,
                f"Unsupported command: {command}",
                {"command": str(command), "reason": "unsupported"},
            )

        logger.info("Edit: apply_command command=%s value=%r", cmd.value, value)
        surface.focus()

        if cmd.is_history:
            changed = self._backend.undo(surface) if cmd is Command.UNDO else self._backend.redo(surface)
            return self._finish(surface, cmd, changed, notify=False)

        try:
            selection = current_selection(surface)
        except NoSelectionError:
            logger.info("Edit noop: apply_command command=%s no_selection", cmd.value)
            return OperationResult(
                False,
                "No active selection; command skipped.",
                {"command": cmd.value, "reason": "no_selection"},
            )

        if cmd.takes_value and (value is None or not str(value).strip()):
            logger.info("Edit noop: apply_command command=%s missing value", cmd.value)
            return OperationResult(
                False,
                f"Command '{cmd.value}' requires a value.",
                {"command": cmd.value, "reason": "missing_value"},
            )

        changed = self._dispatch(surface, selection, cmd, None if value is None else str(value).strip())
        return self._finish(surface, cmd, changed, notify=cmd not in _SELF_NOTIFYING)

    # ----------------------------------------------------------------- Helpers

    def _dispatch(
        self,
        surface: EditableSurface,
        selection: Selection,
        cmd: Command,
        value: Optional[str],
    ) -> bool:
        backend = self._backend
        if cmd is Command.BOLD:
            return backend.bold(surface, selection)
        if cmd is Command.ITALIC:
            return backend.italic(surface, selection)
        if cmd is Command.UNDERLINE:
            return backend.underline(surface, selection)
        if cmd is Command.STRIKE_THROUGH:
            return backend.strike_through(surface, selection)
        if cmd is Command.SUBSCRIPT:
            return backend.subscript(surface, selection)
        if cmd is Command.SUPERSCRIPT:
            return backend.superscript(surface, selection)
        if cmd is Command.JUSTIFY_LEFT:
            return backend.justify(surface, selection, "left")
        if cmd is Command.JUSTIFY_CENTER:
            return backend.justify(surface, selection, "center")
        if cmd is Command.JUSTIFY_RIGHT:
            return backend.justify(surface, selection, "right")
        if cmd is Command.INSERT_ORDERED_LIST:
            return backend.insert_list(surface, selection, ordered=True)
        if cmd is Command.INSERT_UNORDERED_LIST:
            return backend.insert_list(surface, selection, ordered=False)
        if cmd is Command.FORMAT_BLOCK:
            return backend.format_block(surface, selection, value or _DEFAULT_BLOCK)
        if cmd is Command.INSERT_HORIZONTAL_RULE:
            return backend.insert_horizontal_rule(surface, selection)
        if cmd is Command.REMOVE_FORMAT:
            return backend.remove_format(surface, selection)
        if cmd is Command.FONT_NAME:
            return backend.font_name(surface, selection, value)
        if cmd is Command.FORE_COLOR:
            return backend.fore_color(surface, selection, value)
        if cmd is Command.HILITE_COLOR:
            return backend.hilite_color(surface, selection, value)
        if cmd is Command.FONT_SIZE:
            neutral = backend.font_size(surface, selection, self._neutral_font_size)
            # The neutral step leaves the restyled content selected
            selection = surface.get_selection() or selection
            return backend.font_size(surface, selection, value) or neutral
        raise AssertionError(f"Unhandled command {cmd!r}")

    def _finish(self, surface: EditableSurface, cmd: Command, changed: bool, notify: bool) -> OperationResult:
        if not changed:
            logger.info("Edit noop: apply_command command=%s no change", cmd.value)
            return OperationResult(False, f"'{cmd.value}' made no change.", {"command": cmd.value, "reason": "no_change"})
        if notify:
            surface.notify_changed()
        logger.info("Edit OK: apply_command command=%s", cmd.value)
        return OperationResult(True, f"Applied '{cmd.value}'.", {"command": cmd.value})
