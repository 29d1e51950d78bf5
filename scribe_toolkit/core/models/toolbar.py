"""Toolbar configuration models.

Data structures describing the editor toolbar: buttons bound to formatting
commands, popups or the save action, and the options offered by the font
family / font size selectors.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Dict, Iterable, List, Optional

__all__ = ["ToolbarButton", "SelectOption", "load_toolbar", "load_options"]

logger = logging.getLogger(__name__)

_ACTIONS = {"command", "popup", "save"}
_POPUPS = {"table", "image", "link"}


@dataclass
class ToolbarButton:
    """A single toolbar button."""

    label: str
    action: str = "command"
    tooltip: Optional[str] = None
    command: Optional[str] = None
    value: Optional[str] = None
    popup: Optional[str] = None
    enabled: bool = True

    def __post_init__(self):
        """Validate button configuration after initialization."""
        if not self.label:
            raise ValueError("Button label cannot be empty")
        if self.action not in _ACTIONS:
            raise ValueError(f"Unknown toolbar action '{self.action}'")
        if self.action == "command" and not self.command:
            raise ValueError(f"Command button '{self.label}' has no command")
        if self.action == "popup" and self.popup not in _POPUPS:
            raise ValueError(f"Popup button '{self.label}' has unknown popup '{self.popup}'")


@dataclass(frozen=True)
class SelectOption:
    """An entry of a selector (value sent to the command, label shown)."""

    value: str
    label: str


def load_toolbar(entries: Iterable[Dict[str, Any]]) -> List[ToolbarButton]:
    """Build toolbar buttons from configuration mappings.

    Entries that fail validation are skipped; the remaining layout is kept.
    """
    buttons: List[ToolbarButton] = []
    for entry in entries or []:
        if not isinstance(entry, dict):
            logger.warning("Skipping toolbar entry %r: expected a mapping", entry)
            continue
        try:
            buttons.append(ToolbarButton(**entry))
        except (TypeError, ValueError) as exc:
            logger.warning("Skipping invalid toolbar entry %r: %s", entry, exc)
            continue
    return buttons


def load_options(entries: Iterable[Any]) -> List[SelectOption]:
    """Accept either plain strings or ``{value, label}`` mappings."""
    options: List[SelectOption] = []
    for entry in entries or []:
        if isinstance(entry, dict) and "value" in entry:
            value = str(entry["value"])
            options.append(SelectOption(value, str(entry.get("label", value))))
        elif isinstance(entry, (str, int)):
            options.append(SelectOption(str(entry), str(entry)))
    return options
