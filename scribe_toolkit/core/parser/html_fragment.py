from __future__ import annotations

"""HTML fragment parsing and serialisation.

Markup is parsed with ``lxml.html`` into a throwaway document and converted
into detached :mod:`scribe_toolkit.core.models.nodes` objects, so the result
has no tie to any temporary tree. Serialisation goes the other way, building
an ``lxml.html`` element and letting lxml handle escaping and void elements.
"""

from typing import Iterable, List, Optional
import logging

import lxml.html
from lxml import etree as ET

from scribe_toolkit.core.exceptions import FragmentParseError
from scribe_toolkit.core.models.nodes import Comment, Element, Node, Text
from scribe_toolkit.core.utils import xml_safe

__all__ = ["parse_fragment", "serialize_nodes", "serialize_node"]

logger = logging.getLogger(__name__)

_HOLDER_TAG = "div"


def parse_fragment(markup: str) -> List[Node]:
    """Parse *markup* into an ordered list of detached nodes.

    Empty markup yields an empty list. Whitespace-only text directly between
    block-level elements may be dropped by the HTML parser.
    """
    if markup is None or markup == "":
        return []
    if not isinstance(markup, str):
        raise FragmentParseError(f"Markup must be a string, got {type(markup).__name__}")
    try:
        document = lxml.html.document_fromstring(f"<html><body>{markup}</body></html>")
    except (ET.ParserError, ValueError) as exc:
        logger.warning("Parse FAIL: fragment len=%d error=%s", len(markup), exc)
        raise FragmentParseError(f"Could not parse markup: {exc}", cause=exc) from exc

    body = document.find("body")
    if body is None:
        return []
    nodes = _convert_children(body)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Parse OK: fragment len=%d nodes=%d", len(markup), len(nodes))
    return nodes


def _convert_children(source) -> List[Node]:
    nodes: List[Node] = []
    if source.text:
        nodes.append(Text(source.text))
    for child in source:
        node = _convert(child)
        if node is not None:
            nodes.append(node)
        if child.tail:
            nodes.append(Text(child.tail))
    return nodes


def _convert(source) -> Optional[Node]:
    if source.tag is ET.Comment:
        return Comment(source.text or "")
    if not isinstance(source.tag, str):
        # Processing instructions and entities have no counterpart here
        return None
    element = Element(source.tag, {str(k): str(v) for k, v in source.attrib.items()})
    for child in _convert_children(source):
        element.append(child)
    return element


def serialize_nodes(nodes: Iterable[Node]) -> str:
    """Return the markup of *nodes* concatenated (like ``innerHTML``)."""
    holder = lxml.html.Element(_HOLDER_TAG)
    _append_nodes(holder, nodes)
    markup = lxml.html.tostring(holder, encoding="unicode")
    prefix, suffix = f"<{_HOLDER_TAG}>", f"</{_HOLDER_TAG}>"
    if markup.startswith(prefix) and markup.endswith(suffix):
        return markup[len(prefix):-len(suffix)]
    return markup


def serialize_node(node: Node) -> str:
    """Return the markup of a single node (like ``outerHTML``)."""
    return serialize_nodes([node])


def _append_nodes(parent, nodes: Iterable[Node]) -> None:
    # Text, comments and attribute values are written without XML-incompatible
    # control characters
    last = None
    for node in nodes:
        if isinstance(node, Text):
            data = xml_safe(node.data)
            if not data:
                continue
            if last is None:
                parent.text = (parent.text or "") + data
            else:
                last.tail = (last.tail or "") + data
        elif isinstance(node, Comment):
            data = xml_safe(node.data)
            while "--" in data:
                data = data.replace("--", "- -")
            last = ET.Comment(data + " " if data.endswith("-") else data)
            parent.append(last)
        elif isinstance(node, Element):
            attrib = {key: xml_safe(value) for key, value in node.attrib.items()}
            last = ET.SubElement(parent, node.tag, attrib)
            _append_nodes(last, node.children)
