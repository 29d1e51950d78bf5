"""Shared fixtures and selection pad helpers.

Selections are written inline in markup:

- ``[`` / ``]`` start and end a range inside text, ``^`` is a caret in text;
- ``{`` / ``}`` start and end a range between elements, ``|`` is a caret
  between elements.

``load_pad`` parses such markup into a surface and sets its selection;
``render_pad`` serializes a surface with its selection written back in.
"""

from typing import Dict, List, Optional, Tuple

import pytest

from scribe_toolkit.config import ConfigManager
from scribe_toolkit.core.models.nodes import Element, Node, Text
from scribe_toolkit.core.models.selection import Point, Selection
from scribe_toolkit.core.models.surface import EditableSurface
from scribe_toolkit.core.parser.html_fragment import serialize_nodes
from scribe_toolkit.core.storage import MemoryStore, reset_default_store

_TEXT_MARKS = {"[": "\ue000", "]": "\ue001", "^": "\ue002"}
_ELEMENT_MARKS = {"{": "start", "}": "end", "|": "caret"}
_SENTINEL_ROLE = {"\ue000": "start", "\ue001": "end", "\ue002": "caret"}
_PAD_ATTR = "data-pad"


def _encode(pad: str) -> str:
    out = []
    for ch in pad:
        if ch in _TEXT_MARKS:
            out.append(_TEXT_MARKS[ch])
        elif ch in _ELEMENT_MARKS:
            out.append(f'<span {_PAD_ATTR}="{_ELEMENT_MARKS[ch]}"></span>')
        else:
            out.append(ch)
    return "".join(out)


def _next_marker(root: Element) -> Optional[Tuple[str, Point, Node]]:
    for node in root.iter():
        if isinstance(node, Element) and node.get(_PAD_ATTR):
            return node.get(_PAD_ATTR), Point.before(node), node
        if isinstance(node, Text):
            for idx, ch in enumerate(node.data):
                if ch in _SENTINEL_ROLE:
                    return _SENTINEL_ROLE[ch], Point(node, idx), node
    return None


def load_pad(surface: EditableSurface, pad: str) -> Optional[Selection]:
    """Load *pad* into *surface* and select the marked points."""
    surface.load_markup(_encode(pad))
    points: Dict[str, Point] = {}
    while True:
        found = _next_marker(surface.root)
        if found is None:
            break
        role, point, node = found
        if isinstance(node, Text):
            node.data = node.data[:point.offset] + node.data[point.offset + 1:]
        else:
            node.detach()
        points[role] = point
    selection = None
    if "caret" in points:
        selection = Selection.caret(points["caret"])
    elif "start" in points and "end" in points:
        selection = Selection(points["start"], points["end"])
    surface.set_selection(selection)
    return selection


def _follow(root: Element, path: List[int]) -> Node:
    node: Node = root
    for idx in path:
        node = node.children[idx]
    return node


def _mark(container: Node, offset: int, text_mark: str, element_mark: str) -> None:
    if isinstance(container, Text):
        container.data = container.data[:offset] + text_mark + container.data[offset:]
    else:
        container.insert(offset, Text(element_mark))


def render_pad(surface: EditableSurface) -> str:
    """Serialize *surface* with its selection drawn in pad notation."""
    selection = surface.get_selection()
    copy = surface.root.clone(deep=True)
    if selection is not None:
        root_depth = len(surface.root.path())
        start, end = selection.start, selection.end
        start_node = _follow(copy, start.container.path()[root_depth:])
        end_node = _follow(copy, end.container.path()[root_depth:])
        if selection.is_caret:
            _mark(start_node, start.offset, "\ue002", "\ue012")
        else:
            _mark(end_node, end.offset, "\ue001", "\ue011")
            _mark(start_node, start.offset, "\ue000", "\ue010")
    markup = serialize_nodes(copy.children)
    for sentinel, ch in (("\ue000", "["), ("\ue001", "]"), ("\ue002", "^"),
                         ("\ue010", "{"), ("\ue011", "}"), ("\ue012", "|")):
        markup = markup.replace(sentinel, ch)
    return markup


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config, data and log directories at a temp folder."""
    monkeypatch.setenv("SCRIBE_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("SCRIBE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("SCRIBE_LOG_DIR", str(tmp_path / "logs"))
    ConfigManager.reset()
    reset_default_store()
    yield
    ConfigManager.reset()
    reset_default_store()


@pytest.fixture
def surface():
    return EditableSurface()


@pytest.fixture
def pad(surface):
    """Load pad markup into the ``surface`` fixture; returns the surface."""
    def _load(markup: str) -> EditableSurface:
        load_pad(surface, markup)
        return surface
    return _load


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def render():
    """Return the pad renderer (``render(surface) -> str``)."""
    return render_pad
