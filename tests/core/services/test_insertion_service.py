import pytest

from scribe_toolkit.core.generators.fragment_builder import build_link, build_table
from scribe_toolkit.core.models.selection import Point, Selection
from scribe_toolkit.core.models.surface import EditableSurface
from scribe_toolkit.core.services.insertion_service import FragmentInsertionService


@pytest.fixture
def service():
    return FragmentInsertionService()


def test_insert_replaces_selection_and_places_caret_after(service, pad, render):
    surface = pad("foo[bar]baz")
    result = service.insert_fragment(surface, "<b>X</b>")
    assert result.success
    assert result.inserted == 1
    assert render(surface) == "foo<b>X</b>|baz"
    assert result.selection == surface.get_selection()
    assert result.selection.is_caret


def test_insert_at_caret_keeps_surrounding_text(service, pad, render):
    surface = pad("foo^bar")
    table = build_table(1, 1)
    service.insert_fragment(surface, table)
    assert render(surface) == f"foo{table}|bar"


def test_insert_focuses_surface(service, pad):
    surface = pad("a^b")
    surface.blur()
    service.insert_fragment(surface, "x")
    assert surface.focused


def test_repeated_insertions_chain_in_order(service, pad, render):
    surface = pad("a^b")
    service.insert_fragment(surface, "<i>1</i>")
    service.insert_fragment(surface, "<u>2</u>")
    assert render(surface) == "a<i>1</i><u>2</u>|b"


def test_multiple_top_level_nodes_keep_order(service, pad, render):
    surface = pad("<p>x^</p>")
    result = service.insert_fragment(surface, "one<br>two")
    assert result.inserted == 3
    assert render(surface) == "<p>xone<br>two|</p>"


def test_selection_spanning_paragraphs(service, pad, render):
    surface = pad("<p>fo[o</p><p>ba]r</p>")
    service.insert_fragment(surface, "X")
    assert render(surface) == "<p>fo</p>X|<p>r</p>"


def test_backward_selection_is_handled_like_forward(service):
    surface = EditableSurface("foobarbaz")
    text = surface.root.children[0]
    surface.set_selection(Selection(Point(text, 6), Point(text, 3)))
    service.insert_fragment(surface, build_link("https://e.com", "L"))
    assert surface.inner_html == (
        'foo<a href="https://e.com" target="_blank" rel="noopener noreferrer">L</a>baz'
    )


def test_element_range_is_replaced(service, pad, render):
    surface = pad("<p>{foo}</p>")
    service.insert_fragment(surface, "bar")
    assert render(surface) == "<p>bar|</p>"


def test_empty_fragment_collapses_selection(service, pad, render):
    surface = pad("foo[bar]baz")
    result = service.insert_fragment(surface, "")
    assert result.success
    assert result.inserted == 0
    assert render(surface) == "foo^baz"


def test_empty_fragment_at_caret_changes_nothing(service, pad, render):
    surface = pad("foo^bar")
    changes = []
    surface.add_listener(changes.append)
    service.insert_fragment(surface, "")
    assert render(surface) == "foo^bar"
    assert changes == []


def test_no_selection_is_a_noop(service):
    surface = EditableSurface("<p>keep</p>")
    result = service.insert_fragment(surface, "<b>x</b>")
    assert not result.success
    assert result.selection is None
    assert result.details["reason"] == "no_selection"
    assert surface.inner_html == "<p>keep</p>"


def test_stale_selection_is_dropped_on_focus(service, pad):
    surface = pad("<p>a^b</p><p>c</p>")
    surface.root.children[0].detach()
    result = service.insert_fragment(surface, "x")
    assert not result.success
    assert surface.inner_html == "<p>c</p>"
    assert surface.get_selection() is None


def test_unparsable_fragment_leaves_surface_untouched(service, pad, render):
    surface = pad("foo[bar]baz")
    result = service.insert_fragment(surface, 42)
    assert not result.success
    assert result.details["reason"] == "parse_error"
    assert render(surface) == "foo[bar]baz"


def test_listeners_notified_once(service, pad):
    surface = pad("a[b]c")
    calls = []
    surface.add_listener(lambda s: calls.append(s.inner_html))
    service.insert_fragment(surface, "<hr>")
    assert calls == ["a<hr>c"]


def test_insert_text_replaces_range_and_advances_caret(service, pad, render):
    surface = pad("<p>fo[o b]ar</p>")
    result = service.insert_text(surface, "X")
    assert result.success
    assert render(surface) == "<p>foX^ar</p>"


def test_insert_text_drops_control_characters(service, pad, render):
    surface = pad("a^b")
    assert service.insert_text(surface, "x\x0by").success
    assert render(surface) == "axy^b"


def test_insert_across_paragraphs_keeps_both_outer_parts(service, pad, render):
    surface = pad("<p>a<b>b[c</b>d</p><p>e<i>f]g</i>h</p>")
    assert service.insert_fragment(surface, "X").success
    assert render(surface) == "<p>a<b>b</b></p>X|<p><i>g</i>h</p>"
