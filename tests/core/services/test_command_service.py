import pytest

from scribe_toolkit.core.models.surface import EditableSurface
from scribe_toolkit.core.services.command_service import (
    Command,
    CommandDispatcher,
    FormattingBackend,
)


class RecordingBackend(FormattingBackend):
    """Backend that records calls and reports a configurable change flag."""

    def __init__(self, changed=True):
        self.calls = []
        self.changed = changed

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        return self.changed

    def bold(self, surface, selection):
        return self._record("bold")

    def italic(self, surface, selection):
        return self._record("italic")

    def underline(self, surface, selection):
        return self._record("underline")

    def strike_through(self, surface, selection):
        return self._record("strike_through")

    def subscript(self, surface, selection):
        return self._record("subscript")

    def superscript(self, surface, selection):
        return self._record("superscript")

    def justify(self, surface, selection, align):
        return self._record("justify", align)

    def insert_list(self, surface, selection, ordered):
        return self._record("insert_list", ordered)

    def format_block(self, surface, selection, tag):
        return self._record("format_block", tag)

    def insert_horizontal_rule(self, surface, selection):
        return self._record("insert_horizontal_rule")

    def remove_format(self, surface, selection):
        return self._record("remove_format")

    def font_name(self, surface, selection, value):
        return self._record("font_name", value)

    def fore_color(self, surface, selection, value):
        return self._record("fore_color", value)

    def hilite_color(self, surface, selection, value):
        return self._record("hilite_color", value)

    def font_size(self, surface, selection, value):
        return self._record("font_size", value)

    def undo(self, surface):
        return self._record("undo")

    def redo(self, surface):
        return self._record("redo")


@pytest.fixture
def backend():
    return RecordingBackend()


@pytest.fixture
def dispatcher(backend):
    return CommandDispatcher(backend)


def test_command_set_has_twenty_members():
    assert len(list(Command)) == 20
    assert Command.parse("STRIKETHROUGH") is Command.STRIKE_THROUGH
    assert Command.parse(Command.BOLD) is Command.BOLD
    with pytest.raises(ValueError):
        Command.parse("createLink")


def test_value_and_history_flags():
    assert {c for c in Command if c.takes_value} == {
        Command.FONT_NAME, Command.FORE_COLOR, Command.HILITE_COLOR, Command.FONT_SIZE,
    }
    assert {c for c in Command if c.is_history} == {Command.UNDO, Command.REDO}


@pytest.mark.parametrize(
    "name, value, expected",
    [
        ("bold", None, ("bold",)),
        ("italic", None, ("italic",)),
        ("underline", None, ("underline",)),
        ("strikeThrough", None, ("strike_through",)),
        ("subscript", None, ("subscript",)),
        ("superscript", None, ("superscript",)),
        ("justifyLeft", None, ("justify", "left")),
        ("justifyCenter", None, ("justify", "center")),
        ("justifyRight", None, ("justify", "right")),
        ("insertOrderedList", None, ("insert_list", True)),
        ("insertUnorderedList", None, ("insert_list", False)),
        ("formatBlock", None, ("format_block", "blockquote")),
        ("formatBlock", "h2", ("format_block", "h2")),
        ("insertHorizontalRule", None, ("insert_horizontal_rule",)),
        ("removeFormat", None, ("remove_format",)),
        ("fontName", "Georgia", ("font_name", "Georgia")),
        ("foreColor", "#ff0000", ("fore_color", "#ff0000")),
        ("hiliteColor", "yellow", ("hilite_color", "yellow")),
    ],
)
def test_commands_route_to_backend(dispatcher, backend, pad, name, value, expected):
    surface = pad("a[b]c")
    result = dispatcher.apply_command(surface, name, value)
    assert result.success
    assert result.details["command"] == name
    assert backend.calls == [expected]


def test_font_size_applies_neutral_size_first(dispatcher, backend, pad):
    surface = pad("a[b]c")
    dispatcher.apply_command(surface, "fontSize", "5")
    assert backend.calls == [("font_size", "7"), ("font_size", "5")]


def test_neutral_font_size_is_configurable(backend, pad):
    surface = pad("a[b]c")
    CommandDispatcher(backend, neutral_font_size="1").apply_command(surface, Command.FONT_SIZE, "4")
    assert backend.calls == [("font_size", "1"), ("font_size", "4")]


def test_unsupported_command_is_reported(dispatcher, backend, pad):
    surface = pad("a[b]c")
    result = dispatcher.apply_command(surface, "createLink")
    assert not result.success
    assert result.details["reason"] == "unsupported"
    assert backend.calls == []


def test_missing_selection_skips_backend(dispatcher, backend):
    surface = EditableSurface("<p>a</p>")
    result = dispatcher.apply_command(surface, "bold")
    assert not result.success
    assert result.details["reason"] == "no_selection"
    assert surface.focused
    assert backend.calls == []


@pytest.mark.parametrize("value", [None, "", "   "])
def test_value_commands_need_a_value(dispatcher, backend, pad, value):
    surface = pad("a[b]c")
    result = dispatcher.apply_command(surface, "foreColor", value)
    assert not result.success
    assert result.details["reason"] == "missing_value"
    assert backend.calls == []


def test_history_commands_do_not_need_a_selection(dispatcher, backend):
    surface = EditableSurface("<p>a</p>")
    assert dispatcher.apply_command(surface, "undo").success
    assert dispatcher.apply_command(surface, "redo").success
    assert backend.calls == [("undo",), ("redo",)]


def test_no_change_is_not_a_success(pad):
    surface = pad("a[b]c")
    notified = []
    surface.add_listener(notified.append)
    result = CommandDispatcher(RecordingBackend(changed=False)).apply_command(surface, "bold")
    assert not result.success
    assert result.details["reason"] == "no_change"
    assert notified == []


def test_listeners_notified_after_change(dispatcher, pad):
    surface = pad("a[b]c")
    notified = []
    surface.add_listener(notified.append)
    dispatcher.apply_command(surface, "italic")
    assert notified == [surface]
