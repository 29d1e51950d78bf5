from __future__ import annotations

"""Selection accessor and small selection helpers.

``current_selection`` is the only way the services read the host's active
selection. It does not check that the selection lies within the surface;
callers force focus onto the surface first, which drops any selection that
no longer points into it.
"""

import logging

from scribe_toolkit.core.exceptions import NoSelectionError
from scribe_toolkit.core.models.nodes import Element, Node
from scribe_toolkit.core.models.selection import Point, Selection
from scribe_toolkit.core.models.surface import EditableSurface

__all__ = [
    "current_selection",
    "select",
    "caret_at",
    "caret_at_end",
    "select_node",
    "select_node_contents",
]

logger = logging.getLogger(__name__)


def current_selection(surface: EditableSurface) -> Selection:
    """Return the host's active selection or raise :class:`NoSelectionError`."""
    selection = surface.get_selection()
    if selection is None:
        logger.debug("Selection: none active")
        raise NoSelectionError()
    return selection


def select(surface: EditableSurface, anchor: Point, focus: Point) -> Selection:
    selection = Selection(anchor, focus)
    surface.set_selection(selection)
    return selection


def caret_at(surface: EditableSurface, node: Node, offset: int) -> Selection:
    point = Point(node, offset)
    return select(surface, point, point)


def caret_at_end(surface: EditableSurface) -> Selection:
    """Place the caret after the last child of the surface."""
    point = surface.end_point()
    return select(surface, point, point)


def select_node(surface: EditableSurface, node: Node) -> Selection:
    """Select *node* itself, as a whole, from its parent."""
    return select(surface, Point.before(node), Point.after(node))


def select_node_contents(surface: EditableSurface, node: Element) -> Selection:
    return select(surface, Point(node, 0), Point(node, node.length))
