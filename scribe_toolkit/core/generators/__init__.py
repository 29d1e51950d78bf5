from __future__ import annotations

"""Modules responsible for generating markup fragments for insertion."""

from .fragment_builder import build_image, build_link, build_table  # noqa: F401

__all__: list[str] = [
    "build_table",
    "build_image",
    "build_link",
]
