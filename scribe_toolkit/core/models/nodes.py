from __future__ import annotations

"""Minimal markup tree used by the editing core.

The tree mirrors the subset of the DOM the editor needs: character data
(text and comments) and elements with ordered attributes and children.
Node equality is identity, so nodes can be used as range containers and
looked up in sibling lists without ambiguity.

Parsing and serialisation live in :mod:`scribe_toolkit.core.parser`; this
module performs no I/O.
"""

from typing import Dict, Iterator, List, Optional

__all__ = ["Node", "CharacterData", "Text", "Comment", "Element"]


class Node:
    """Base class for every tree node."""

    def __init__(self) -> None:
        self.parent: Optional[Element] = None

    # ------------------------------------------------------------------
    # Tree position
    # ------------------------------------------------------------------
    @property
    def index(self) -> int:
        """Position of this node among its parent's children."""
        if self.parent is None:
            raise ValueError("Detached node has no index")
        return self.parent.child_index(self)

    @property
    def length(self) -> int:
        """DOM length: characters for character data, children for elements."""
        raise NotImplementedError

    @property
    def previous_sibling(self) -> Optional[Node]:
        if self.parent is None:
            return None
        idx = self.index
        return self.parent.children[idx - 1] if idx > 0 else None

    @property
    def next_sibling(self) -> Optional[Node]:
        if self.parent is None:
            return None
        idx = self.index
        siblings = self.parent.children
        return siblings[idx + 1] if idx + 1 < len(siblings) else None

    def ancestors(self) -> Iterator[Element]:
        """Yield ancestors from the parent up to the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def root(self) -> Node:
        node: Node = self
        while node.parent is not None:
            node = node.parent
        return node

    def is_inclusive_ancestor_of(self, other: Node) -> bool:
        node: Optional[Node] = other
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    def path(self) -> List[int]:
        """Child indices from the root down to this node."""
        indices: List[int] = []
        node: Node = self
        while node.parent is not None:
            indices.append(node.index)
            node = node.parent
        indices.reverse()
        return indices

    def detach(self) -> Node:
        """Remove this node from its parent (no-op when already detached)."""
        if self.parent is not None:
            self.parent.remove(self)
        return self

    def clone(self, deep: bool = True) -> Node:
        raise NotImplementedError


class CharacterData(Node):
    """Node holding a run of characters."""

    def __init__(self, data: str = "") -> None:
        super().__init__()
        self.data = data

    @property
    def length(self) -> int:
        return len(self.data)

    def clone(self, deep: bool = True) -> CharacterData:
        return type(self)(self.data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.data!r})"


class Text(CharacterData):
    """Text run."""

    def split(self, offset: int) -> Text:
        """Split at *offset*; the tail becomes a new sibling which is returned."""
        if offset < 0 or offset > len(self.data):
            raise IndexError(f"Split offset {offset} outside text of length {len(self.data)}")
        tail = Text(self.data[offset:])
        self.data = self.data[:offset]
        if self.parent is not None:
            self.parent.insert(self.index + 1, tail)
        return tail


class Comment(CharacterData):
    """Markup comment (kept so that loaded documents survive a round trip)."""


class Element(Node):
    """Element with a lower-case tag, ordered attributes and children."""

    def __init__(self, tag: str, attrib: Optional[Dict[str, str]] = None) -> None:
        super().__init__()
        self.tag = tag.lower()
        self.attrib: Dict[str, str] = dict(attrib or {})
        self.children: List[Node] = []

    @property
    def length(self) -> int:
        return len(self.children)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.attrib.get(key, default)

    def set(self, key: str, value: str) -> None:
        self.attrib[key] = value

    def child_index(self, child: Node) -> int:
        for idx, candidate in enumerate(self.children):
            if candidate is child:
                return idx
        raise ValueError(f"{child!r} is not a child of {self!r}")

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def insert(self, index: int, child: Node) -> None:
        """Insert *child* at *index*, detaching it from any previous parent."""
        if child.is_inclusive_ancestor_of(self):
            raise ValueError("Cannot insert a node into its own subtree")
        if child.parent is self:
            current = self.child_index(child)
            self.children.pop(current)
            if current < index:
                index -= 1
        else:
            child.detach()
        index = max(0, min(index, len(self.children)))
        self.children.insert(index, child)
        child.parent = self

    def append(self, child: Node) -> None:
        self.insert(len(self.children), child)

    def extend(self, children: List[Node]) -> None:
        for child in list(children):
            self.append(child)

    def remove(self, child: Node) -> None:
        self.children.pop(self.child_index(child))
        child.parent = None

    def detach_children(self) -> List[Node]:
        """Detach and return all children in order."""
        children = self.children
        self.children = []
        for child in children:
            child.parent = None
        return children

    def replace_with_children(self) -> List[Node]:
        """Unwrap this element: its children take its place in the parent."""
        parent = self.parent
        children = self.detach_children()
        if parent is not None:
            idx = self.index
            parent.remove(self)
            for offset, child in enumerate(children):
                parent.insert(idx + offset, child)
        return children

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------
    def iter(self) -> Iterator[Node]:
        """Pre-order traversal of descendants (excluding self)."""
        for child in self.children:
            yield child
            if isinstance(child, Element):
                yield from child.iter()

    def text_content(self) -> str:
        return "".join(n.data for n in self.iter() if isinstance(n, Text))

    def clone(self, deep: bool = True) -> Element:
        twin = Element(self.tag, self.attrib)
        if deep:
            for child in self.children:
                twin.append(child.clone(deep=True))
        return twin

    def __repr__(self) -> str:
        return f"Element({self.tag!r}, children={len(self.children)})"
