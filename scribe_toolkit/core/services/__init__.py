from __future__ import annotations

"""High-level editing services (insertion, formatting, history, persistence, preview).

Services are UI-agnostic and report routine failures through result objects
rather than exceptions.
"""

from .insertion_service import FragmentInsertionService, InsertionResult  # noqa: F401
from .command_service import Command, CommandDispatcher, FormattingBackend  # noqa: F401
from .formatting_backend import TreeFormattingBackend  # noqa: F401
from .undo_service import UndoService  # noqa: F401
from .preview_service import PreviewService, PreviewResult  # noqa: F401
from .persistence_service import PersistenceService  # noqa: F401

__all__: list[str] = [
    "FragmentInsertionService",
    "InsertionResult",
    "Command",
    "CommandDispatcher",
    "FormattingBackend",
    "TreeFormattingBackend",
    "UndoService",
    "PreviewService",
    "PreviewResult",
    "PersistenceService",
]
