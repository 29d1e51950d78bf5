from __future__ import annotations

"""The editable surface: the single user-editable document region.

The surface plays the part of the host environment as well. It owns the root
element, a focus flag and the host's one active selection, which callers read
and replace explicitly instead of consulting ambient global state.
"""

from typing import Callable, List, Optional

from .nodes import Element, Node
from .selection import Point, Selection

__all__ = ["EditableSurface", "SurfaceListener"]

SurfaceListener = Callable[["EditableSurface"], None]


class EditableSurface:
    """User-editable markup region with focus and selection state.

    Attributes
    ----------
    root
        Container element whose children form the document.
    focused
        Whether the surface currently owns keyboard focus.
    """

    def __init__(self, markup: str = "", tag: str = "div") -> None:
        self.root = Element(tag, {"contenteditable": "true"})
        self.focused: bool = False
        self._selection: Optional[Selection] = None
        self._listeners: List[SurfaceListener] = []
        if markup:
            from scribe_toolkit.core.parser.html_fragment import parse_fragment

            self.root.extend(parse_fragment(markup))

    # ------------------------------------------------------------------
    # Focus and selection (host contract)
    # ------------------------------------------------------------------
    def focus(self) -> None:
        """Give the surface focus, dropping a selection that went stale."""
        self.focused = True
        if self._selection is not None and not self._selection.is_attached_to(self.root):
            self._selection = None

    def blur(self) -> None:
        self.focused = False

    def get_selection(self) -> Optional[Selection]:
        return self._selection

    def set_selection(self, selection: Optional[Selection]) -> None:
        if selection is not None and not selection.is_attached_to(self.root):
            raise ValueError("Selection does not lie within the editable surface")
        self._selection = selection

    def clear_selection(self) -> None:
        self._selection = None

    def contains(self, node: Node) -> bool:
        return self.root.is_inclusive_ancestor_of(node)

    def end_point(self) -> Point:
        return Point(self.root, len(self.root.children))

    # ------------------------------------------------------------------
    # Markup
    # ------------------------------------------------------------------
    @property
    def inner_html(self) -> str:
        # Imported here: the parser imports the node model from this package
        from scribe_toolkit.core.parser.html_fragment import serialize_nodes

        return serialize_nodes(self.root.children)

    def load_markup(self, markup: str) -> None:
        """Replace the whole document with *markup* verbatim."""
        from scribe_toolkit.core.parser.html_fragment import parse_fragment

        nodes = parse_fragment(markup)
        self.root.detach_children()
        self.root.extend(nodes)
        self._selection = None
        self.notify_changed()

    # ------------------------------------------------------------------
    # Change listeners
    # ------------------------------------------------------------------
    def add_listener(self, listener: SurfaceListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: SurfaceListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def notify_changed(self) -> None:
        for listener in list(self._listeners):
            listener(self)
