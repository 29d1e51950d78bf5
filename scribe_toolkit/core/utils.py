from __future__ import annotations

"""Simple reusable helper functions.

These helpers are side-effect-free and contain no GUI or disk I/O; they can be
used across all layers of the toolkit.
"""

from typing import Dict, Optional, Union
import logging
import re

__all__ = [
    "parse_leading_int",
    "clamp_dimension",
    "parse_pixels",
    "format_pixels",
    "parse_style",
    "format_style",
    "xml_safe",
]

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
# Characters libxml2 refuses in text and attribute values
_XML_INVALID = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def parse_leading_int(raw: object) -> Optional[int]:
    """Return the integer at the start of *raw*, or ``None``.

    Mirrors how number inputs are read by the editor: leading whitespace is
    skipped and anything after the digits is ignored.

    Examples:
        >>> parse_leading_int("4")
        4
        >>> parse_leading_int(" 12abc")
        12
        >>> parse_leading_int("4.7")
        4
        >>> parse_leading_int("abc") is None
        True
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw == raw and raw not in (float("inf"), float("-inf")) else None
    if not isinstance(raw, str):
        return None
    match = _LEADING_INT.match(raw)
    return int(match.group(1)) if match else None


def clamp_dimension(raw: object, lower: int = 1, upper: int = 10, fallback: int = 3) -> int:
    """Normalise a table row/column field edit.

    Non-numeric input gives *fallback*; numbers are clamped to
    ``[lower, upper]`` (so ``0`` becomes ``1`` and ``11`` becomes ``10``).
    """
    value = parse_leading_int(raw)
    if value is None:
        return fallback
    return max(lower, min(upper, value))


def parse_pixels(raw: Union[str, int, float, None]) -> Optional[float]:
    """Parse an optional pixel magnitude.

    Blank, unparsable and non-positive values yield ``None`` so the caller
    simply omits the dimension.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if not text:
            return None
        if text.lower().endswith("px"):
            text = text[:-2].strip()
        try:
            value = float(text)
        except ValueError:
            logger.debug("Ignoring non-numeric pixel value %r", raw)
            return None
    if value != value or value <= 0 or value == float("inf"):
        return None
    return value


def format_pixels(value: float) -> str:
    """Render a pixel magnitude without a trailing ``.0`` (``100`` -> ``100px``)."""
    if float(value).is_integer():
        return f"{int(value)}px"
    return f"{value:.4f}".rstrip("0").rstrip(".") + "px"


def parse_style(style: Optional[str]) -> Dict[str, str]:
    """Parse an inline ``style`` attribute into an ordered mapping."""
    declarations: Dict[str, str] = {}
    for chunk in (style or "").split(";"):
        name, sep, value = chunk.partition(":")
        if not sep:
            continue
        name = name.strip().lower()
        if name:
            declarations[name] = value.strip()
    return declarations


def format_style(declarations: Dict[str, str]) -> str:
    """Inverse of :func:`parse_style`; returns ``""`` for no declarations."""
    return " ".join(f"{name}: {value};" for name, value in declarations.items())


def xml_safe(text: str) -> str:
    """Drop the control characters that cannot appear in serialised markup.

    Examples:
        >>> xml_safe("a\\x0bb")
        'ab'
        >>> xml_safe("tab\\tand newline\\n")
        'tab\\tand newline\\n'
    """
    return _XML_INVALID.sub("", text)
