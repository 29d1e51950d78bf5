"""Top-level package for Scribe Toolkit.

Front-ends (GUI, CLI) should only depend on the public API exposed here and
in :mod:`scribe_toolkit.core.services` rather than importing internal modules
directly.
"""

from .core.models import EditableSurface  # re-export for convenience

__all__: list[str] = [
    "EditableSurface",
]
