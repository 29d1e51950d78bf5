import pytest

from scribe_toolkit.core.exceptions import InvalidFieldValue
from scribe_toolkit.core.generators.fragment_builder import build_image, build_link, build_table


TABLE_OPEN = '<table border="1" style="width:100%; border-collapse: collapse;">'


def _cell(r, c):
    return f'<td style="padding: 8px;">Cell {r}-{c}</td>'


def test_build_table_two_by_two_exact_markup():
    expected = (
        TABLE_OPEN
        + "<tr>" + _cell(1, 1) + _cell(1, 2) + "</tr>"
        + "<tr>" + _cell(2, 1) + _cell(2, 2) + "</tr>"
        + "</table>"
    )
    assert build_table(2, 2) == expected


def test_build_table_is_deterministic_and_row_major():
    markup = build_table(3, 4)
    assert markup == build_table(3, 4)
    assert markup.count("<tr>") == 3
    assert markup.count("<td ") == 12
    assert markup.index("Cell 1-4") < markup.index("Cell 2-1")


@pytest.mark.parametrize("rows,cols", [(1, 1), (10, 10), (1, 10)])
def test_build_table_accepts_bounds(rows, cols):
    markup = build_table(rows, cols)
    assert markup.count("<tr>") == rows
    assert f"Cell {rows}-{cols}" in markup


@pytest.mark.parametrize("rows,cols", [(0, 3), (3, 11), (-1, 1), ("3", 3), (2.5, 2), (True, 2)])
def test_build_table_rejects_out_of_range_or_non_int(rows, cols):
    with pytest.raises(InvalidFieldValue):
        build_table(rows, cols)


def test_build_image_keep_aspect_ignores_height():
    assert build_image("http://x/i.png", "100", "50", keep_aspect=True) == (
        '<img src="http://x/i.png" alt="Inserted image" style="width:100px;">'
    )


def test_build_image_without_aspect_lock_emits_both_dimensions():
    assert build_image("http://x/i.png", "100", "50", keep_aspect=False) == (
        '<img src="http://x/i.png" alt="Inserted image" style="width:100px;height:50px;">'
    )


def test_build_image_height_only_when_unlocked():
    assert build_image("http://x/i.png", "", "80", keep_aspect=False) == (
        '<img src="http://x/i.png" alt="Inserted image" style="height:80px;">'
    )


def test_build_image_without_dimensions_has_no_style():
    assert build_image("http://x/i.png") == '<img src="http://x/i.png" alt="Inserted image">'


def test_build_image_ignores_unusable_dimensions():
    assert build_image("http://x/i.png", "abc", "-4", keep_aspect=False) == (
        '<img src="http://x/i.png" alt="Inserted image">'
    )


def test_build_image_trims_url_and_accepts_numbers():
    assert build_image("  http://x/i.png  ", 120) == (
        '<img src="http://x/i.png" alt="Inserted image" style="width:120px;">'
    )


@pytest.mark.parametrize("url", ["", "   ", None])
def test_build_image_requires_url(url):
    with pytest.raises(InvalidFieldValue):
        build_image(url)


def test_build_link_uses_text_as_label():
    assert build_link("https://example.com", "Example") == (
        '<a href="https://example.com" target="_blank" rel="noopener noreferrer">Example</a>'
    )


@pytest.mark.parametrize("text", [None, "", "   "])
def test_build_link_falls_back_to_url_label(text):
    assert build_link("https://example.com", text) == (
        '<a href="https://example.com" target="_blank" rel="noopener noreferrer">https://example.com</a>'
    )


def test_build_link_escapes_label():
    markup = build_link("https://example.com", "<b>& co</b>")
    assert ">&lt;b&gt;&amp; co&lt;/b&gt;</a>" in markup


def test_build_link_requires_url():
    with pytest.raises(InvalidFieldValue):
        build_link("  ", "label")


def test_build_link_drops_control_characters():
    markup = build_link("https://example.com/\x0b", "Ex\x0campl\x00e")
    assert markup == (
        '<a href="https://example.com/" target="_blank" rel="noopener noreferrer">Example</a>'
    )
