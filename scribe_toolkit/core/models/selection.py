from __future__ import annotations

"""Boundary points and selections over the markup tree."""

from dataclasses import dataclass

from .nodes import CharacterData, Element, Node

__all__ = ["Point", "Selection", "compare_points"]


@dataclass(frozen=True)
class Point:
    """A boundary point ``(container, offset)``.

    For character data the offset counts characters; for elements it counts
    children, so ``Point(div, 2)`` sits between the second and third child.
    """

    container: Node
    offset: int

    @classmethod
    def before(cls, node: Node) -> Point:
        if node.parent is None:
            raise ValueError("Detached node has no position")
        return cls(node.parent, node.index)

    @classmethod
    def after(cls, node: Node) -> Point:
        if node.parent is None:
            raise ValueError("Detached node has no position")
        return cls(node.parent, node.index + 1)

    def is_valid(self) -> bool:
        return 0 <= self.offset <= self.container.length

    def key(self) -> list:
        """Sort key in tree order.

        A point inside child *i* of an element compares after ``(element, i)``
        and before ``(element, i + 1)``; list prefix ordering gives exactly that.
        """
        return self.container.path() + [self.offset]


def compare_points(a: Point, b: Point) -> int:
    """Return -1, 0 or 1 as *a* is before, equal to or after *b*."""
    if a.container is b.container:
        return (a.offset > b.offset) - (a.offset < b.offset)
    if a.container.root() is not b.container.root():
        raise ValueError("Points belong to different trees")
    ka, kb = a.key(), b.key()
    return (ka > kb) - (ka < kb)


@dataclass(frozen=True)
class Selection:
    """Anchor/focus pair. A caret when both points coincide."""

    anchor: Point
    focus: Point

    @classmethod
    def caret(cls, point: Point) -> Selection:
        return cls(point, point)

    @classmethod
    def span(cls, start: Point, end: Point) -> Selection:
        return cls(start, end)

    @property
    def is_caret(self) -> bool:
        return (
            self.anchor.container is self.focus.container
            and self.anchor.offset == self.focus.offset
        )

    @property
    def is_backward(self) -> bool:
        return compare_points(self.anchor, self.focus) > 0

    @property
    def start(self) -> Point:
        return self.focus if self.is_backward else self.anchor

    @property
    def end(self) -> Point:
        return self.anchor if self.is_backward else self.focus

    def collapsed_to_start(self) -> Selection:
        return Selection.caret(self.start)

    def is_attached_to(self, root: Element) -> bool:
        """True while both containers live under *root* at valid offsets."""
        for point in (self.anchor, self.focus):
            if not root.is_inclusive_ancestor_of(point.container):
                return False
            if not point.is_valid():
                return False
        return True

    def describe(self) -> str:
        def _fmt(point: Point) -> str:
            node = point.container
            label = node.tag if isinstance(node, Element) else (
                "#text" if isinstance(node, CharacterData) else type(node).__name__
            )
            return f"{label}@{point.offset}"

        if self.is_caret:
            return f"caret {_fmt(self.anchor)}"
        return f"range {_fmt(self.start)}..{_fmt(self.end)}"
