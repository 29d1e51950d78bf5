from __future__ import annotations

"""Range algorithms over the markup tree.

These follow the DOM Range semantics the editor relies on:

- ``extract_contents`` / ``delete_contents`` remove exactly the content
  between two boundary points. Elements that are only partially selected keep
  their unselected parts; nothing is merged.
- ``insert_nodes`` places an ordered node sequence at a point, splitting a
  text container when needed, and reports the point right after the last
  inserted node.
- ``split_ancestors`` splits inline ancestors at a point so that content can
  be reinserted outside of them.

All functions mutate the tree in place and return the boundary points the
caller needs; they never touch any selection state.
"""

from typing import List, Tuple

from scribe_toolkit.core.models.nodes import CharacterData, Element, Node, Text
from scribe_toolkit.core.models.selection import Point, compare_points

__all__ = [
    "extract_contents",
    "delete_contents",
    "insert_nodes",
    "insert_text",
    "split_ancestors",
    "is_contained",
]


def is_contained(node: Node, start: Point, end: Point) -> bool:
    """True when *node* lies entirely between *start* and *end*."""
    return (
        compare_points(Point(node, 0), start) > 0
        and compare_points(Point(node, node.length), end) < 0
    )


def _child_of(ancestor: Node, node: Node) -> Node:
    while node.parent is not ancestor:
        if node.parent is None:
            raise ValueError("Node is not a descendant of the given ancestor")
        node = node.parent
    return node


def extract_contents(start: Point, end: Point) -> Tuple[List[Node], Point]:
    """Remove the content between *start* and *end* and return it.

    Returns the detached nodes (partially selected elements are represented
    by shallow clones holding the selected part) and the collapsed point where
    the content used to be.
    """
    if compare_points(start, end) > 0:
        raise ValueError("Range start is after its end")
    if start.container is end.container and start.offset == end.offset:
        return [], start

    osn, oso = start.container, start.offset
    oen, oeo = end.container, end.offset

    if osn is oen and isinstance(osn, CharacterData):
        clone = osn.clone()
        clone.data = osn.data[oso:oeo]
        osn.data = osn.data[:oso] + osn.data[oeo:]
        return [clone], Point(osn, oso)

    common = osn
    while not common.is_inclusive_ancestor_of(oen):
        common = common.parent
    assert isinstance(common, Element)

    first_partial = None
    if not osn.is_inclusive_ancestor_of(oen):
        first_partial = _child_of(common, osn)
    last_partial = None
    if not oen.is_inclusive_ancestor_of(osn):
        last_partial = _child_of(common, oen)
    contained = [child for child in common.children if is_contained(child, start, end)]

    # Resolve the collapse point before anything moves
    if osn.is_inclusive_ancestor_of(oen):
        collapse = Point(osn, oso)
    else:
        reference = osn
        while reference.parent is not None and not reference.parent.is_inclusive_ancestor_of(oen):
            reference = reference.parent
        collapse = Point(reference.parent, reference.index + 1)

    fragment: List[Node] = []

    if isinstance(first_partial, CharacterData):
        clone = first_partial.clone()
        clone.data = first_partial.data[oso:]
        first_partial.data = first_partial.data[:oso]
        fragment.append(clone)
    elif first_partial is not None:
        shell = first_partial.clone(deep=False)
        inner, _ = extract_contents(start, Point(first_partial, first_partial.length))
        shell.extend(inner)
        fragment.append(shell)

    for child in contained:
        fragment.append(child.detach())

    if isinstance(last_partial, CharacterData):
        clone = last_partial.clone()
        clone.data = last_partial.data[:oeo]
        last_partial.data = last_partial.data[oeo:]
        fragment.append(clone)
    elif last_partial is not None:
        shell = last_partial.clone(deep=False)
        inner, _ = extract_contents(Point(last_partial, 0), end)
        shell.extend(inner)
        fragment.append(shell)

    return fragment, collapse


def delete_contents(start: Point, end: Point) -> Point:
    """Delete the content between *start* and *end*; return the collapsed point."""
    _, collapse = extract_contents(start, end)
    return collapse


def insert_nodes(point: Point, nodes: List[Node]) -> Point:
    """Insert *nodes* in order at *point* and return the point after the last one.

    A text container is split at the offset; inserting at either end of a
    text node places the nodes beside it without leaving an empty text node.
    """
    container, offset = point.container, point.offset
    if isinstance(container, CharacterData):
        parent = container.parent
        if parent is None:
            raise ValueError("Cannot insert next to a detached text node")
        if offset <= 0:
            reference = container
        elif offset >= container.length or not isinstance(container, Text):
            reference = container.next_sibling
        else:
            reference = container.split(offset)
    else:
        assert isinstance(container, Element)
        parent = container
        reference = container.children[offset] if offset < len(container.children) else None

    index = reference.index if reference is not None else len(parent.children)
    for node in nodes:
        parent.insert(index, node)
        index += 1
    return Point(parent, index)


def insert_text(point: Point, text: str) -> Point:
    """Insert *text* at *point*, merging into adjacent text; return the new caret."""
    container, offset = point.container, point.offset
    if isinstance(container, Text):
        container.data = container.data[:offset] + text + container.data[offset:]
        return Point(container, offset + len(text))
    if isinstance(container, CharacterData):
        point = Point.after(container)
        container, offset = point.container, point.offset
    assert isinstance(container, Element)

    before = container.children[offset - 1] if offset > 0 else None
    if isinstance(before, Text):
        before.data += text
        return Point(before, before.length)
    after = container.children[offset] if offset < len(container.children) else None
    if isinstance(after, Text):
        after.data = text + after.data
        return Point(after, len(text))
    node = Text(text)
    container.insert(offset, node)
    return Point(node, len(text))


def split_ancestors(point: Point, top: Element) -> Point:
    """Split every ancestor of *point* up to and including *top*.

    Returns the point in ``top.parent`` that sits between the two halves.
    Halves that would be empty are not created.
    """
    if top.parent is None:
        raise ValueError("Cannot split the root element")
    container, offset = point.container, point.offset
    if isinstance(container, CharacterData):
        parent = container.parent
        idx = container.index
        if offset <= 0:
            container, offset = parent, idx
        elif offset >= container.length or not isinstance(container, Text):
            container, offset = parent, idx + 1
        else:
            container.split(offset)
            container, offset = parent, idx + 1

    stop = top.parent
    while container is not stop:
        if container is None:
            raise ValueError("Point is not inside the element to split")
        parent = container.parent
        idx = container.index
        if offset <= 0:
            offset = idx
        elif offset >= container.length:
            offset = idx + 1
        else:
            twin = container.clone(deep=False)
            for child in list(container.children[offset:]):
                twin.append(child)
            parent.insert(idx + 1, twin)
            offset = idx + 1
        container = parent
    return Point(container, offset)
