"""Builders turning structured popup input into serialized markup fragments.

The functions here are pure: they validate their input, assemble an
``lxml.html`` element and return its serialisation. They never touch the
editable surface; the insertion service takes the returned markup from there.
"""

from typing import Optional, Union
import logging

import lxml.html

from scribe_toolkit.core.exceptions import InvalidFieldValue
from scribe_toolkit.core.utils import format_pixels, parse_pixels, xml_safe

logger = logging.getLogger(__name__)

__all__ = [
    "build_table",
    "build_image",
    "build_link",
    "TABLE_MIN",
    "TABLE_MAX",
]

TABLE_MIN = 1
TABLE_MAX = 10

TABLE_STYLE = "width:100%; border-collapse: collapse;"
CELL_STYLE = "padding: 8px;"
IMAGE_ALT = "Inserted image"
LINK_TARGET = "_blank"
LINK_REL = "noopener noreferrer"

Pixels = Union[str, int, float, None]


def _serialize(element) -> str:
    return lxml.html.tostring(element, encoding="unicode")


def _check_dimension(field: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidFieldValue(field, value, "expected an integer")
    if not TABLE_MIN <= value <= TABLE_MAX:
        raise InvalidFieldValue(field, value, f"expected {TABLE_MIN}..{TABLE_MAX}")
    return value


def _require_url(field: str, url: object) -> str:
    cleaned = xml_safe(url).strip() if isinstance(url, str) else ""
    if not cleaned:
        raise InvalidFieldValue(field, url, "a non-blank URL is required")
    return cleaned


def build_table(rows: int, cols: int) -> str:
    """Return a bordered table of ``rows`` x ``cols`` placeholder cells.

    Cells read ``Cell {r}-{c}`` (1-indexed) in row-major order. The same
    dimensions always produce the same markup.
    """
    rows = _check_dimension("rows", rows)
    cols = _check_dimension("cols", cols)

    table = lxml.html.Element("table")
    table.set("border", "1")
    table.set("style", TABLE_STYLE)
    for r in range(1, rows + 1):
        tr = lxml.html.Element("tr")
        table.append(tr)
        for c in range(1, cols + 1):
            td = lxml.html.Element("td")
            td.set("style", CELL_STYLE)
            td.text = f"Cell {r}-{c}"
            tr.append(td)

    logger.debug("Build: table rows=%d cols=%d", rows, cols)
    return _serialize(table)


def build_image(
    url: str,
    width: Pixels = None,
    height: Pixels = None,
    keep_aspect: bool = True,
) -> str:
    """Return an ``<img>`` tag for *url*.

    ``width`` and ``height`` are optional pixel magnitudes. With
    ``keep_aspect`` the height is never applied, so the browser scales the
    image from the width alone (or shows it at natural size).
    """
    src = _require_url("url", url)
    style = ""
    w = parse_pixels(width)
    if w is not None:
        style += f"width:{format_pixels(w)};"
    h = parse_pixels(height)
    if h is not None and not keep_aspect:
        style += f"height:{format_pixels(h)};"

    img = lxml.html.Element("img")
    img.set("src", src)
    img.set("alt", IMAGE_ALT)
    if style:
        img.set("style", style)

    logger.debug("Build: image style=%r keep_aspect=%s", style, keep_aspect)
    return _serialize(img)


def build_link(url: str, text: Optional[str] = None) -> str:
    """Return an anchor to *url* labelled *text* (or the URL itself).

    The anchor always opens in a new browsing context and never exposes the
    opener or the referrer to it.
    """
    href = _require_url("url", url)
    label = xml_safe(text) if text is not None else ""
    if not label.strip():
        label = href

    anchor = lxml.html.Element("a")
    anchor.set("href", href)
    anchor.set("target", LINK_TARGET)
    anchor.set("rel", LINK_REL)
    anchor.text = label

    logger.debug("Build: link label_fallback=%s", label is href)
    return _serialize(anchor)
