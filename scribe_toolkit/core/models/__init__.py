from __future__ import annotations

"""Shared data structures used across the Scribe Toolkit core.

This package exposes the markup tree, selections, the editable surface and
the popup form state. It is intentionally free of UI / I/O code so that the
contained objects can be reused in any context (unit-tests, CLI, GUI, etc.).
"""

from .nodes import CharacterData, Comment, Element, Node, Text
from .selection import Point, Selection, compare_points
from .surface import EditableSurface
from .forms import ImageFormState, LinkFormState, TableFormState
from .results import OperationResult
from .toolbar import SelectOption, ToolbarButton, load_options, load_toolbar

__all__ = [
    "Node",
    "CharacterData",
    "Text",
    "Comment",
    "Element",
    "Point",
    "Selection",
    "compare_points",
    "EditableSurface",
    "TableFormState",
    "ImageFormState",
    "LinkFormState",
    "OperationResult",
    "ToolbarButton",
    "SelectOption",
    "load_toolbar",
    "load_options",
]
