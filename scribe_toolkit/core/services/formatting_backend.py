from __future__ import annotations

"""Tree-editing implementation of the formatting commands.

Inline commands (bold, colours, sizes, ...) work in place on the selected
content: boundary text nodes are split, the fully selected nodes are grouped
into runs of inline siblings and each run is restyled. When a run sits inside
an element that carries the style being removed, that element is split
around the run first so content outside the selection keeps its formatting.

Block commands (alignment, lists, block formats) act on the block that
encloses the selection. Inline content placed directly in the surface root is
wrapped in a ``<div>`` first so it has a block to carry the formatting.

Selections are preserved across edits by pinning each boundary point to a
neighbouring node that survives the edit.
"""

import logging
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple

from scribe_toolkit.core.models.nodes import CharacterData, Element, Node, Text
from scribe_toolkit.core.models.selection import Point, Selection
from scribe_toolkit.core.models.surface import EditableSurface
from scribe_toolkit.core.ranges import is_contained, split_ancestors
from scribe_toolkit.core.services.command_service import FormattingBackend
from scribe_toolkit.core.services.insertion_service import FragmentInsertionService
from scribe_toolkit.core.services.undo_service import UndoService
from scribe_toolkit.core.utils import format_style, parse_style

__all__ = ["TreeFormattingBackend", "BLOCK_TAGS", "FORMATTING_TAGS"]

logger = logging.getLogger(__name__)

BLOCK_TAGS = frozenset({
    "address", "article", "aside", "blockquote", "dd", "details", "div", "dl", "dt",
    "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4", "h5",
    "h6", "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section", "table",
    "tbody", "td", "tfoot", "th", "thead", "tr", "ul",
})

# Elements that only carry presentation; removeFormat unwraps them
FORMATTING_TAGS = frozenset({
    "b", "strong", "i", "em", "u", "s", "strike", "del", "ins", "sub", "sup", "font",
    "span", "big", "small", "tt", "mark",
})

FORMAT_BLOCK_TAGS = frozenset({"p", "div", "h1", "h2", "h3", "h4", "h5", "h6", "pre", "blockquote", "address"})

_LIST_TAGS = ("ol", "ul")
_TABLE_CELLS = ("td", "th")
_TABLE_PARTS = ("tr", "thead", "tbody", "tfoot")

Matcher = Callable[[Element], bool]
Stripper = Callable[[Element], bool]


# ---------------------------------------------------------------------------
# Tree helpers
# ---------------------------------------------------------------------------

def _is_block(node: Node) -> bool:
    return isinstance(node, Element) and node.tag in BLOCK_TAGS


def _enclosing_block(node: Node, root: Element) -> Element:
    current = node if isinstance(node, Element) else node.parent
    while current is not None and current is not root:
        if current.tag in BLOCK_TAGS:
            return current
        current = current.parent
    return root


def _inline_ancestors(node: Node, block: Element) -> Iterator[Element]:
    """Yield *node* (when an element) and its ancestors below *block*."""
    current = node if isinstance(node, Element) else node.parent
    while current is not None and current is not block:
        yield current
        current = current.parent


def _common_ancestor(a: Node, b: Node) -> Node:
    node = a
    while not node.is_inclusive_ancestor_of(b):
        node = node.parent
    return node


def _is_blank(element: Element) -> bool:
    """True when *element* holds no text and no non-formatting elements."""
    for node in element.iter():
        if isinstance(node, Text) and node.data:
            return False
        if isinstance(node, Element) and node.tag not in FORMATTING_TAGS:
            return False
    return True


def _has_visible(nodes: Sequence[Node]) -> bool:
    for node in nodes:
        if isinstance(node, Text) and node.data:
            return True
        if isinstance(node, Element) and (node.tag not in FORMATTING_TAGS or not _is_blank(node)):
            return True
    return False


def _prune_blank(scope: Element) -> None:
    elements = [n for n in scope.iter() if isinstance(n, Element)]
    for element in reversed(elements):
        if element.tag in FORMATTING_TAGS and element.parent is not None and _is_blank(element):
            element.detach()


def _first_leaf(node: Node) -> Node:
    while isinstance(node, Element) and node.children:
        node = node.children[0]
    return node


def _last_leaf(node: Node) -> Node:
    while isinstance(node, Element) and node.children:
        node = node.children[-1]
    return node


# ---------------------------------------------------------------------------
# Boundary handling
# ---------------------------------------------------------------------------

def _anchor(point: Point) -> tuple:
    container, offset = point.container, point.offset
    if isinstance(container, CharacterData):
        if offset <= 0:
            return ("before", container)
        if offset >= container.length or not isinstance(container, Text):
            return ("after", container)
        return ("split", container, offset)
    if offset < len(container.children):
        return ("before", container.children[offset])
    if container.children:
        return ("after", container.children[-1])
    return ("inside", container)


def _resolve_anchor(anchor: tuple) -> Point:
    kind, node = anchor[0], anchor[1]
    if kind == "before":
        return Point.before(node)
    if kind == "after":
        return Point.after(node)
    return Point(node, 0)


def _split_boundaries(start: Point, end: Point) -> Tuple[Point, Point]:
    """Split boundary text nodes so both points fall between whole nodes."""
    start_anchor, end_anchor = _anchor(start), _anchor(end)
    if start_anchor[0] == "split":
        text, offset = start_anchor[1], start_anchor[2]
        tail = text.split(offset)
        start_anchor = ("before", tail)
        if end_anchor[0] == "split" and end_anchor[1] is text:
            end_anchor = ("split", tail, end_anchor[2] - offset)
        elif end_anchor[0] == "after" and end_anchor[1] is text:
            end_anchor = ("after", tail)
    if end_anchor[0] == "split":
        text = end_anchor[1]
        text.split(end_anchor[2])
        end_anchor = ("after", text)
    return _resolve_anchor(start_anchor), _resolve_anchor(end_anchor)


def _topmost_contained(start: Point, end: Point) -> List[Node]:
    """Nodes wholly inside the range whose parent is not, in tree order."""
    found: List[Node] = []
    common = _common_ancestor(start.container, end.container)
    if not isinstance(common, Element):
        return found

    def walk(element: Element) -> None:
        for child in list(element.children):
            if is_contained(child, start, end):
                found.append(child)
            elif isinstance(child, Element) and (
                child.is_inclusive_ancestor_of(start.container)
                or child.is_inclusive_ancestor_of(end.container)
            ):
                walk(child)

    walk(common)
    return found


def _runs(nodes: Iterable[Node]) -> List[List[Node]]:
    """Group nodes into runs of adjacent inline siblings.

    Block elements are not part of a run; their children are grouped instead.
    """
    runs: List[List[Node]] = []
    current: List[Node] = []
    for node in nodes:
        if _is_block(node):
            if current:
                runs.append(current)
                current = []
            runs.extend(_runs(list(node.children)))
            continue
        if current and (current[-1].parent is not node.parent or current[-1].next_sibling is not node):
            runs.append(current)
            current = []
        current.append(node)
    if current:
        runs.append(current)
    return runs


def _isolate(first: Node, last: Node, top: Element) -> List[Node]:
    """Split *top* around the sibling run ``first..last``.

    Returns the nodes in ``top.parent`` that now hold exactly the run, each
    wrapped in copies of the ancestors it had below *top*.
    """
    parent = top.parent
    right = split_ancestors(Point.after(last), top)
    right_node = parent.children[right.offset] if right.offset < len(parent.children) else None
    left = split_ancestors(Point.before(first), top)
    stop = right_node.index if right_node is not None else len(parent.children)
    return list(parent.children[left.offset:stop])


def _clean(node: Node, matches: Matcher, strip: Stripper) -> List[Node]:
    """Remove a style from *node* and its descendants; return what stands in its place."""
    if not isinstance(node, Element):
        return [node]
    for child in list(node.children):
        _clean(child, matches, strip)
    if matches(node) and strip(node):
        return node.replace_with_children()
    return [node]


def _fully_styled(nodes: Sequence[Node], inherited: bool, matches: Matcher) -> bool:
    for node in nodes:
        if isinstance(node, Text):
            if node.data.strip() and not inherited:
                return False
        elif isinstance(node, Element):
            if not _fully_styled(node.children, inherited or matches(node), matches):
                return False
    return True


def _has_text(nodes: Sequence[Node]) -> bool:
    for node in nodes:
        if isinstance(node, Text) and node.data.strip():
            return True
        if isinstance(node, Element) and _has_text(node.children):
            return True
    return False


# ---------------------------------------------------------------------------
# Style predicates
# ---------------------------------------------------------------------------

def _tag_family(tags: Iterable[str]) -> Tuple[Matcher, Stripper]:
    family = frozenset(tags)
    return (lambda el: el.tag in family), (lambda el: True)


def _font_attribute(name: str) -> Tuple[Matcher, Stripper]:
    def matches(el: Element) -> bool:
        return el.tag == "font" and name in el.attrib

    def strip(el: Element) -> bool:
        el.attrib.pop(name, None)
        return not el.attrib

    return matches, strip


def _span_style(prop: str) -> Tuple[Matcher, Stripper]:
    def matches(el: Element) -> bool:
        return el.tag == "span" and prop in parse_style(el.get("style"))

    def strip(el: Element) -> bool:
        declarations = parse_style(el.get("style"))
        declarations.pop(prop, None)
        if declarations:
            el.set("style", format_style(declarations))
        else:
            el.attrib.pop("style", None)
        return not el.attrib

    return matches, strip


# ---------------------------------------------------------------------------
# Selection pinning
# ---------------------------------------------------------------------------

class _Pin:
    """Remembers a boundary point relative to nodes that survive restructuring."""

    def __init__(self, point: Point) -> None:
        self.point = point
        container = point.container
        self.before: Optional[Node] = None
        self.after: Optional[Node] = None
        self.was_empty = False
        if isinstance(container, Element):
            children = container.children
            self.after = children[point.offset] if point.offset < len(children) else None
            self.before = children[point.offset - 1] if 0 < point.offset <= len(children) else None
            self.was_empty = not children

    def resolve(self, root: Element, prefer: Optional[Point] = None) -> Point:
        container = self.point.container
        if isinstance(container, CharacterData):
            if root.is_inclusive_ancestor_of(container) and self.point.offset <= container.length:
                return self.point
        else:
            if self.after is not None and self.after.parent is not None and root.is_inclusive_ancestor_of(self.after):
                return Point.before(self.after)
            if self.before is not None and self.before.parent is not None and root.is_inclusive_ancestor_of(self.before):
                return Point.after(self.before)
            if root.is_inclusive_ancestor_of(container) and not (self.was_empty and container.length and prefer):
                return Point(container, min(self.point.offset, container.length))
        if prefer is not None:
            return prefer
        return Point(root, len(root.children))


# ---------------------------------------------------------------------------
# Backend
# ---------------------------------------------------------------------------

class TreeFormattingBackend(FormattingBackend):
    """Applies formatting commands directly to the surface tree.

    Parameters
    ----------
    insertion_service : FragmentInsertionService, optional
        Used for ``insertHorizontalRule``.
    undo_service : UndoService, optional
        History used by ``undo``/``redo``; without one both are no-ops.
    """

    def __init__(
        self,
        insertion_service: Optional[FragmentInsertionService] = None,
        undo_service: Optional[UndoService] = None,
    ) -> None:
        self._insertion = insertion_service or FragmentInsertionService()
        self._undo = undo_service

    # ------------------------------------------------------------ Inline toggles

    def bold(self, surface: EditableSurface, selection: Selection) -> bool:
        return self._toggle(surface, selection, "b", ("b", "strong"))

    def italic(self, surface: EditableSurface, selection: Selection) -> bool:
        return self._toggle(surface, selection, "i", ("i", "em"))

    def underline(self, surface: EditableSurface, selection: Selection) -> bool:
        return self._toggle(surface, selection, "u", ("u",))

    def strike_through(self, surface: EditableSurface, selection: Selection) -> bool:
        return self._toggle(surface, selection, "strike", ("s", "strike", "del"))

    def subscript(self, surface: EditableSurface, selection: Selection) -> bool:
        return self._toggle(surface, selection, "sub", ("sub",))

    def superscript(self, surface: EditableSurface, selection: Selection) -> bool:
        return self._toggle(surface, selection, "sup", ("sup",))

    # ------------------------------------------------------------ Inline values

    def font_name(self, surface: EditableSurface, selection: Selection, value: str) -> bool:
        matches, strip = _font_attribute("face")
        return self._restyle(surface, selection, matches, strip, lambda: Element("font", {"face": value}))

    def fore_color(self, surface: EditableSurface, selection: Selection, value: str) -> bool:
        matches, strip = _font_attribute("color")
        return self._restyle(surface, selection, matches, strip, lambda: Element("font", {"color": value}))

    def font_size(self, surface: EditableSurface, selection: Selection, value: str) -> bool:
        matches, strip = _font_attribute("size")
        return self._restyle(surface, selection, matches, strip, lambda: Element("font", {"size": value}))

    def hilite_color(self, surface: EditableSurface, selection: Selection, value: str) -> bool:
        matches, strip = _span_style("background-color")
        style = format_style({"background-color": value})
        return self._restyle(surface, selection, matches, strip, lambda: Element("span", {"style": style}))

    def remove_format(self, surface: EditableSurface, selection: Selection) -> bool:
        matches, strip = _tag_family(FORMATTING_TAGS)
        return self._restyle(surface, selection, matches, strip, None)

    # ------------------------------------------------------------------ Blocks

    def justify(self, surface: EditableSurface, selection: Selection, align: str) -> bool:
        def apply(blocks: List[Element]) -> bool:
            for block in blocks:
                declarations = parse_style(block.get("style"))
                declarations["text-align"] = align
                block.set("style", format_style(declarations))
            return True

        return self._with_blocks(surface, selection, apply, all_blocks=True)

    def insert_list(self, surface: EditableSurface, selection: Selection, ordered: bool) -> bool:
        list_tag = "ol" if ordered else "ul"

        def apply(blocks: List[Element]) -> bool:
            block = blocks[0]
            lst = None
            if block.tag == "li" and block.parent is not None and block.parent.tag in _LIST_TAGS:
                lst = block.parent
            elif block.tag in _LIST_TAGS:
                lst = block
            if lst is not None:
                if lst.tag == list_tag:
                    self._unwrap_list(lst)
                else:
                    lst.tag = list_tag
                return True

            new_list = Element(list_tag)
            item = Element("li")
            new_list.append(item)
            if block.tag in ("div", "p") and block.parent is not None:
                item.attrib.update(block.attrib)
                item.extend(block.detach_children())
                parent, idx = block.parent, block.index
                block.detach()
                parent.insert(idx, new_list)
            else:
                item.extend(block.detach_children())
                block.append(new_list)
            blocks[0] = item
            return True

        return self._with_blocks(surface, selection, apply)

    def format_block(self, surface: EditableSurface, selection: Selection, tag: str) -> bool:
        tag = (tag or "").strip().lower().strip("<>")
        if tag not in FORMAT_BLOCK_TAGS:
            logger.info("Edit noop: format_block unsupported tag=%r", tag)
            return False

        def apply(blocks: List[Element]) -> bool:
            block = blocks[0]
            if tag == "blockquote":
                target = block
                if block.tag == "li" and block.parent is not None and block.parent.tag in _LIST_TAGS:
                    target = block.parent
                if target.tag == "blockquote" or any(a.tag == "blockquote" for a in target.ancestors()):
                    return False
                if target.tag in _TABLE_CELLS:
                    # Cells keep their place in the row; the quote goes inside
                    quote = Element("blockquote")
                    quote.extend(target.detach_children())
                    target.append(quote)
                    blocks[0] = quote
                    return True
                if target.tag in _TABLE_PARTS:
                    logger.info("Edit noop: format_block blockquote between table cells")
                    return False
                quote = Element("blockquote")
                parent = target.parent
                parent.insert(target.index, quote)
                quote.append(target)
                return True
            if block.tag == tag:
                return False
            if block.tag in FORMAT_BLOCK_TAGS:
                block.tag = tag
            else:
                wrapper = Element(tag)
                wrapper.extend(block.detach_children())
                block.append(wrapper)
                blocks[0] = wrapper
            return True

        return self._with_blocks(surface, selection, apply)

    def insert_horizontal_rule(self, surface: EditableSurface, selection: Selection) -> bool:
        return self._insertion.insert_fragment(surface, "<hr>").success

    # ----------------------------------------------------------------- History

    def undo(self, surface: EditableSurface) -> bool:
        return self._undo.undo(surface) if self._undo is not None else False

    def redo(self, surface: EditableSurface) -> bool:
        return self._undo.redo(surface) if self._undo is not None else False

    # ---------------------------------------------------------------- Internals

    def _toggle(self, surface: EditableSurface, selection: Selection, tag: str, family: Sequence[str]) -> bool:
        matches, strip = _tag_family(family)
        return self._restyle(surface, selection, matches, strip, lambda: Element(tag), toggle=True)

    def _restyle(
        self,
        surface: EditableSurface,
        selection: Selection,
        matches: Matcher,
        strip: Stripper,
        make_wrapper: Optional[Callable[[], Element]],
        toggle: bool = False,
    ) -> bool:
        """Remove a style from the selected runs, then optionally reapply it.

        With *toggle*, a selection whose text already carries the style
        everywhere only has it removed.
        """
        if selection.is_caret:
            logger.debug("Edit noop: inline formatting on a caret")
            return False
        root = surface.root
        scope = _enclosing_block(_common_ancestor(selection.start.container, selection.end.container), root)

        start, end = _split_boundaries(selection.start, selection.end)
        runs = [run for run in _runs(_topmost_contained(start, end)) if run]
        if not runs:
            return False

        if toggle and make_wrapper is not None:
            styled = _has_text([n for run in runs for n in run])
            for run in runs:
                block = _enclosing_block(run[0].parent, root)
                inherited = any(matches(a) for a in _inline_ancestors(run[0].parent, block))
                if not _fully_styled(run, inherited, matches):
                    styled = False
                    break
            if styled:
                make_wrapper = None

        first, last = _first_leaf(runs[0][0]), _last_leaf(runs[-1][-1])
        for run in runs:
            pieces = self._unstyle_run(root, run, matches, strip)
            if make_wrapper is not None and pieces and _has_visible(pieces):
                wrapper = make_wrapper()
                parent = pieces[0].parent
                parent.insert(pieces[0].index, wrapper)
                wrapper.extend(pieces)

        _prune_blank(scope)
        surface.set_selection(self._select_leaves(root, scope, first, last))
        return True

    def _unstyle_run(self, root: Element, run: List[Node], matches: Matcher, strip: Stripper) -> List[Node]:
        block = _enclosing_block(run[0].parent, root)
        top = None
        for ancestor in _inline_ancestors(run[0].parent, block):
            if matches(ancestor):
                top = ancestor
        middle = _isolate(run[0], run[-1], top) if top is not None else list(run)
        pieces: List[Node] = []
        for node in middle:
            pieces.extend(_clean(node, matches, strip))
        return pieces

    @staticmethod
    def _select_leaves(root: Element, scope: Element, first: Node, last: Node) -> Selection:
        if not (root.is_inclusive_ancestor_of(first) and root.is_inclusive_ancestor_of(last)) or first.parent is None:
            return Selection.caret(Point(scope, len(scope.children)))
        start = Point(first, 0) if isinstance(first, CharacterData) else Point.before(first)
        end = Point(last, last.length) if isinstance(last, CharacterData) else Point.after(last)
        return Selection(start, end)

    def _with_blocks(
        self,
        surface: EditableSurface,
        selection: Selection,
        apply: Callable[[List[Element]], bool],
        all_blocks: bool = False,
    ) -> bool:
        root = surface.root
        anchor_pin, focus_pin = _Pin(selection.anchor), _Pin(selection.focus)
        start_pin, end_pin = (focus_pin, anchor_pin) if selection.is_backward else (anchor_pin, focus_pin)

        start_block = self._block_at(root, start_pin.resolve(root))
        blocks = [start_block]
        if all_blocks:
            end_block = self._block_at(root, end_pin.resolve(root))
            if end_block is not start_block:
                blocks.extend(self._blocks_between(start_block, end_block))
                blocks.append(end_block)

        changed = apply(blocks)
        prefer = Point(blocks[0], 0) if root.is_inclusive_ancestor_of(blocks[0]) else None
        surface.set_selection(Selection(anchor_pin.resolve(root, prefer), focus_pin.resolve(root, prefer)))
        return changed

    @staticmethod
    def _blocks_between(first: Element, last: Element) -> List[Element]:
        parent = first.parent
        if parent is None or last.parent is not parent:
            return []
        return [n for n in parent.children[first.index + 1:last.index] if _is_block(n)]

    def _block_at(self, root: Element, point: Point) -> Element:
        """Return the block holding *point*, wrapping root-level inline content if needed."""
        block = _enclosing_block(point.container, root)
        if block is not root:
            return block
        if point.container is root:
            return self._wrap_inline_run(root, point.offset, boundary=True)
        top = point.container
        while top.parent is not root:
            top = top.parent
        return self._wrap_inline_run(root, top.index, boundary=False)

    @staticmethod
    def _wrap_inline_run(root: Element, idx: int, boundary: bool) -> Element:
        children = root.children
        if boundary:
            if idx < len(children) and _is_block(children[idx]):
                return children[idx]
            if idx > 0 and _is_block(children[idx - 1]):
                return children[idx - 1]
            lo, hi = idx, idx
        else:
            lo, hi = idx, idx + 1
        while lo > 0 and not _is_block(children[lo - 1]):
            lo -= 1
        while hi < len(children) and not _is_block(children[hi]):
            hi += 1
        run = list(children[lo:hi])
        block = Element("div")
        root.insert(lo, block)
        block.extend(run)
        logger.debug("Wrapped %d root-level inline node(s) in a div", len(run))
        return block

    @staticmethod
    def _unwrap_list(lst: Element) -> None:
        parent = lst.parent
        idx = lst.index
        items = lst.detach_children()
        lst.detach()
        for offset, item in enumerate(items):
            if isinstance(item, Element) and item.tag == "li":
                replacement = Element("div", item.attrib)
                replacement.extend(item.detach_children())
            else:
                replacement = item
            parent.insert(idx + offset, replacement)
