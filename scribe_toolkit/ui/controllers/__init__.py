"""UI controllers package for Scribe Toolkit.

Controllers mediate between front-end widgets and the editing services. They
contain no UI toolkit code.
"""

from .editor_controller import EditorController
from .popup_controllers import (
    ImagePopupController,
    LinkPopupController,
    PopupOutcome,
    PopupState,
    TablePopupController,
)

__all__: list[str] = [
    "EditorController",
    "TablePopupController",
    "ImagePopupController",
    "LinkPopupController",
    "PopupState",
    "PopupOutcome",
]
