from __future__ import annotations

"""Popup form state for the structured-insert dialogs.

One state object exists per popup kind. Values stored here are already
validated by the popup controllers; the ``visible`` flag mirrors whether the
popup is open.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict

__all__ = ["TableFormState", "ImageFormState", "LinkFormState"]


class _FormState:
    """Mixin with helpers shared by the form dataclasses."""

    def values(self) -> Dict[str, Any]:
        """Return field values, excluding the ``visible`` flag."""
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "visible"}

    def reset(self) -> None:
        """Restore every field (including ``visible``) to its default."""
        for f in fields(self):
            setattr(self, f.name, f.default)


@dataclass
class TableFormState(_FormState):
    """Rows and columns for a new table, each in ``[1, 10]``."""

    rows: int = 3
    cols: int = 3
    visible: bool = False


@dataclass
class ImageFormState(_FormState):
    """Image source and optional sizing.

    ``width`` and ``height`` are kept as the raw numeric strings the user
    typed; the fragment builder interprets them.
    """

    url: str = ""
    width: str = ""
    height: str = ""
    keep_aspect: bool = True
    visible: bool = False


@dataclass
class LinkFormState(_FormState):
    url: str = ""
    text: str = ""
    visible: bool = False
