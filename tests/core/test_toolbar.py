import logging

from scribe_toolkit.core.models.toolbar import ToolbarButton, load_toolbar


def test_load_toolbar_builds_buttons():
    buttons = load_toolbar([{"label": "B", "command": "bold"}, {"label": "Save", "action": "save"}])
    assert buttons == [ToolbarButton(label="B", command="bold"), ToolbarButton(label="Save", action="save")]


def test_load_toolbar_warns_about_skipped_entries(caplog):
    entries = [
        {"label": "", "command": "bold"},
        {"label": "T", "action": "popup", "popup": "video"},
        {"label": "B", "command": "bold", "colour": "red"},
        "italic",
        {"label": "I", "command": "italic"},
    ]
    with caplog.at_level(logging.WARNING, logger="scribe_toolkit.core.models.toolbar"):
        buttons = load_toolbar(entries)

    assert [b.label for b in buttons] == ["I"]
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 4
    assert "invalid toolbar entry" in warnings[0].getMessage()
    assert "'video'" in warnings[1].getMessage()
    assert "colour" in warnings[2].getMessage()
    assert "'italic'" in warnings[3].getMessage()


def test_load_toolbar_accepts_missing_section():
    assert load_toolbar(None) == []
