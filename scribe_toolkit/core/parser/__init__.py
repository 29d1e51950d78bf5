from __future__ import annotations

"""Markup parsing helpers.

Turns HTML strings into detached editor nodes and back.
"""

from .html_fragment import parse_fragment, serialize_node, serialize_nodes  # noqa: F401

__all__: list[str] = [
    "parse_fragment",
    "serialize_node",
    "serialize_nodes",
]
