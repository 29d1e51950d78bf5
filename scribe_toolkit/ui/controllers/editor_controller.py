from typing import Any, Callable, Dict, List, Optional

from scribe_toolkit.config import ConfigManager
from scribe_toolkit.core.models.results import OperationResult
from scribe_toolkit.core.models.surface import EditableSurface
from scribe_toolkit.core.models.toolbar import SelectOption, ToolbarButton, load_options, load_toolbar
from scribe_toolkit.core.services.command_service import Command, CommandDispatcher
from scribe_toolkit.core.services.formatting_backend import TreeFormattingBackend
from scribe_toolkit.core.services.insertion_service import FragmentInsertionService, InsertionResult
from scribe_toolkit.core.services.persistence_service import PersistenceService
from scribe_toolkit.core.services.preview_service import PreviewService
from scribe_toolkit.core.services.undo_service import UndoService
from scribe_toolkit.core.storage import KeyValueStore, get_default_store
from scribe_toolkit.ui.controllers.popup_controllers import (
    ImagePopupController,
    LinkPopupController,
    TablePopupController,
)


class EditorController:
    """Controller wiring the toolbar, popups, preview and save to the services.

    The controller owns the editable surface and keeps ``html_content`` (the
    raw markup preview) in sync with it through a surface listener. It holds
    no UI toolkit code; a front-end renders ``toolbar``, ``font_families``,
    ``font_sizes`` and the popup forms, and forwards user actions here.

    Parameters
    ----------
    surface : EditableSurface, optional
        Surface to edit; a new empty one by default.
    store : KeyValueStore, optional
        Store for save/load; the default JSON file store otherwise.
    notifier : callable, optional
        Receives user-facing messages such as ``"Content saved!"``.

    Notes
    -----
    - Every mutation except undo/redo is recorded with before/after undo
      snapshots, so undo steps back over toolbar commands and inserts alike.
    - Routine failures come back as result objects; nothing here raises for
      a missing selection or a cancelled popup.
    """

    def __init__(
        self,
        surface: Optional[EditableSurface] = None,
        store: Optional[KeyValueStore] = None,
        notifier: Optional[Callable[[str], None]] = None,
        insertion_service: Optional[FragmentInsertionService] = None,
        undo_service: Optional[UndoService] = None,
        preview_service: Optional[PreviewService] = None,
    ) -> None:
        config = ConfigManager()
        self.surface: EditableSurface = surface if surface is not None else EditableSurface()
        self.insertion_service = insertion_service or FragmentInsertionService()
        self.undo_service = undo_service or UndoService(config.get_section("undo", "max_history", 50))
        self.preview_service = preview_service or PreviewService()
        self.dispatcher = CommandDispatcher(
            TreeFormattingBackend(self.insertion_service, self.undo_service),
            neutral_font_size=str(config.get_section("font", "neutral_size", "7")),
        )
        self.persistence = PersistenceService(
            store if store is not None else get_default_store(),
            key=config.get_section("storage", "key"),
            notifier=notifier,
        )

        self.table_popup = TablePopupController(
            self.insert_html,
            lower=int(config.get_section("table", "min", 1)),
            upper=int(config.get_section("table", "max", 10)),
            fallback=int(config.get_section("table", "fallback", 3)),
        )
        self.image_popup = ImagePopupController(
            self.insert_html, keep_aspect=bool(config.get_section("image", "keep_aspect", True))
        )
        self.link_popup = LinkPopupController(self.insert_html)
        self._popups = {
            "table": self.table_popup,
            "image": self.image_popup,
            "link": self.link_popup,
        }

        font_cfg = config.get_editor_config().get("font", {}) or {}
        self.toolbar: List[ToolbarButton] = load_toolbar(config.get_toolbar_config().get("buttons", []))
        self.font_families: List[SelectOption] = load_options(font_cfg.get("families", []))
        self.font_sizes: List[SelectOption] = load_options(font_cfg.get("sizes", []))
        self.font_size: str = str(font_cfg.get("default_size", "3"))

        self.html_content: str = ""
        self.surface.add_listener(self._update_html_preview)

    # ---------------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------------

    def _update_html_preview(self, surface: EditableSurface) -> None:
        result = self.preview_service.render_raw(surface)
        self.html_content = result.content or ""

    def _recorded_edit(self, mutate: Callable[[], Any]) -> Any:
        """Execute a mutating operation with pre/post undo snapshots.

        - Pushes a snapshot before mutation (a no-op when unchanged).
        - Executes the provided callable.
        - On success (``result.success`` true), pushes a post snapshot.
        - Returns the original result.
        """
        self.undo_service.push_snapshot(self.surface)
        result = mutate()
        if bool(getattr(result, "success", False)):
            self.undo_service.push_snapshot(self.surface)
        return result

    # ---------------------------------------------------------------------------------
    # Lifecycle
    # ---------------------------------------------------------------------------------

    def initialize(self) -> OperationResult:
        """Load the saved document (if any) and record it as the undo baseline."""
        result = self.persistence.load(self.surface)
        self._update_html_preview(self.surface)
        self.undo_service.clear()
        self.undo_service.push_snapshot(self.surface)
        return result

    # ---------------------------------------------------------------------------------
    # Editing
    # ---------------------------------------------------------------------------------

    def insert_html(self, markup: str) -> InsertionResult:
        return self._recorded_edit(lambda: self.insertion_service.insert_fragment(self.surface, markup))

    def type_text(self, text: str) -> InsertionResult:
        return self._recorded_edit(lambda: self.insertion_service.insert_text(self.surface, text))

    def handle_command(self, command: str, value: Optional[str] = None) -> OperationResult:
        """Apply a toolbar command; history commands are not recorded."""
        try:
            parsed = Command.parse(command)
        except ValueError:
            return self.dispatcher.apply_command(self.surface, command, value)
        if parsed.is_history:
            return self.dispatcher.apply_command(self.surface, parsed, value)
        return self._recorded_edit(lambda: self.dispatcher.apply_command(self.surface, parsed, value))

    def handle_font_size_change(self, size: str) -> OperationResult:
        self.font_size = str(size)
        return self.handle_command(Command.FONT_SIZE, str(size))

    def handle_font_family_change(self, family: str) -> OperationResult:
        return self.handle_command(Command.FONT_NAME, family)

    def handle_text_color_change(self, color: str) -> OperationResult:
        return self.handle_command(Command.FORE_COLOR, color)

    def handle_bg_color_change(self, color: str) -> OperationResult:
        return self.handle_command(Command.HILITE_COLOR, color)

    # ---------------------------------------------------------------------------------
    # Toolbar, popups and save
    # ---------------------------------------------------------------------------------

    def popup(self, name: str):
        """Return the popup controller called *name* (``table``, ``image``, ``link``)."""
        try:
            return self._popups[name]
        except KeyError:
            raise KeyError(f"Unknown popup: {name}") from None

    def trigger(self, button: ToolbarButton) -> Optional[OperationResult]:
        """Perform the action bound to a toolbar *button*.

        Popup buttons only open their popup and return ``None``.
        """
        if not button.enabled:
            return OperationResult(False, f"'{button.label}' is disabled.", {"reason": "disabled"})
        if button.action == "popup":
            self.popup(button.popup).open()
            return None
        if button.action == "save":
            return self.save_html_content()
        return self.handle_command(button.command, button.value)

    def save_html_content(self) -> OperationResult:
        return self.persistence.save(self.surface)

    def state(self) -> Dict[str, Any]:
        """Snapshot of the controller state for front-ends and diagnostics."""
        return {
            "html_content": self.html_content,
            "font_size": self.font_size,
            "can_undo": self.undo_service.can_undo(),
            "can_redo": self.undo_service.can_redo(),
            "popups": {name: popup.state.value for name, popup in self._popups.items()},
        }
