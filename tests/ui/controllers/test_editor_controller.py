import pytest

from scribe_toolkit.core.models.toolbar import ToolbarButton
from scribe_toolkit.core.services.selection_service import caret_at_end, select_node_contents
from scribe_toolkit.core.storage import MemoryStore
from scribe_toolkit.ui.controllers.popup_controllers import PopupState
from scribe_toolkit.ui.controllers.editor_controller import EditorController


@pytest.fixture
def messages():
    return []


@pytest.fixture
def editor(messages):
    controller = EditorController(store=MemoryStore({"editorContent": "<p>hello</p>"}), notifier=messages.append)
    controller.initialize()
    return controller


def _select_all(editor):
    select_node_contents(editor.surface, editor.surface.root)


def _button(editor, **match):
    for button in editor.toolbar:
        if all(getattr(button, k) == v for k, v in match.items()):
            return button
    raise AssertionError(f"no toolbar button matching {match}")


def test_initialize_loads_saved_content(editor):
    assert editor.surface.inner_html == "<p>hello</p>"
    assert editor.html_content == "<p>hello</p>"
    assert not editor.undo_service.can_undo()


def test_initialize_with_empty_store():
    controller = EditorController(store=MemoryStore())
    result = controller.initialize()
    assert result.success
    assert controller.html_content == ""


def test_toolbar_and_selectors_from_config(editor):
    assert len(editor.toolbar) == 20
    commands = [b.command for b in editor.toolbar if b.action == "command"]
    assert len(commands) == 16
    assert {b.popup for b in editor.toolbar if b.action == "popup"} == {"table", "image", "link"}
    assert editor.toolbar[-1].action == "save"
    assert len(editor.font_families) == 9
    assert [o.value for o in editor.font_sizes] == [str(n) for n in range(1, 10)]
    assert editor.font_size == "3"


def test_command_updates_preview_and_undo(editor):
    _select_all(editor)
    assert editor.handle_command("bold").success
    assert editor.html_content == "<p><b>hello</b></p>"
    assert editor.state()["can_undo"]

    assert editor.handle_command("undo").success
    assert editor.html_content == "<p>hello</p>"
    assert editor.handle_command("redo").success
    assert editor.html_content == "<p><b>hello</b></p>"


def test_failed_command_leaves_no_history(editor):
    result = editor.handle_command("bold")
    assert not result.success
    assert result.details["reason"] == "no_selection"
    assert not editor.undo_service.can_undo()


def test_unsupported_command(editor):
    result = editor.handle_command("createLink")
    assert not result.success
    assert result.details["reason"] == "unsupported"


def test_font_size_change(editor):
    _select_all(editor)
    assert editor.handle_font_size_change("5").success
    assert editor.font_size == "5"
    assert editor.html_content == '<p><font size="5">hello</font></p>'


def test_colour_and_family_handlers(editor):
    _select_all(editor)
    editor.handle_font_family_change("Georgia")
    editor.handle_text_color_change("#00ff00")
    editor.handle_bg_color_change("yellow")
    html = editor.html_content
    assert 'face="Georgia"' in html
    assert 'color="#00ff00"' in html
    assert 'background-color: yellow;' in html


def test_type_text_at_end(editor):
    caret_at_end(editor.surface)
    editor.type_text("x")
    assert editor.html_content == "<p>hello</p>x"


def test_typed_control_characters_do_not_break_saving(editor):
    caret_at_end(editor.surface)
    editor.type_text("ok")
    editor.type_text("a\x0bb")
    assert editor.html_content == "<p>hello</p>okab"
    assert editor.save_html_content().success


def test_popup_button_opens_popup(editor):
    result = editor.trigger(_button(editor, popup="table"))
    assert result is None
    assert editor.table_popup.state is PopupState.OPEN
    assert editor.state()["popups"]["table"] == "open"


def test_table_popup_inserts_at_caret(editor):
    caret_at_end(editor.surface)
    editor.trigger(_button(editor, popup="table"))
    editor.table_popup.set_field("rows", "1")
    editor.table_popup.set_field("cols", "2")
    assert editor.table_popup.submit().success
    assert editor.html_content.startswith("<p>hello</p><table")
    assert "Cell 1-2" in editor.html_content
    assert editor.undo_service.can_undo()


def test_popup_submit_without_selection_fails(editor):
    popup = editor.popup("link")
    popup.open()
    popup.set_field("url", "https://example.com")
    result = popup.submit()
    assert not result.success
    assert editor.html_content == "<p>hello</p>"


def test_unknown_popup(editor):
    with pytest.raises(KeyError):
        editor.popup("video")


def test_disabled_button(editor):
    result = editor.trigger(ToolbarButton(label="B", command="bold", enabled=False))
    assert not result.success
    assert result.details["reason"] == "disabled"


def test_command_button_uses_configured_value(editor):
    select_node_contents(editor.surface, editor.surface.root.children[0])
    editor.trigger(_button(editor, command="formatBlock"))
    assert editor.html_content == "<blockquote><p>hello</p></blockquote>"


def test_save_button_persists_and_notifies(editor, messages):
    result = editor.trigger(_button(editor, action="save"))
    assert result.success
    assert messages == ["Content saved!"]
    assert editor.persistence.key == "editorContent"


def test_save_then_reload(messages):
    store = MemoryStore()
    first = EditorController(store=store)
    first.initialize()
    caret_at_end(first.surface)
    first.insert_html("<p>kept</p>")
    first.save_html_content()

    second = EditorController(store=store)
    second.initialize()
    assert second.html_content == "<p>kept</p>"
