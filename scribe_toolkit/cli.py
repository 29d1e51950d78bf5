"""Command line front-end.

Each sub-command loads the saved document, places the caret at its end,
applies one edit and saves the result back, so edits can be chained from a
shell::

    scribe insert-table --rows 2 --cols 2
    scribe insert-link https://example.com --text Example
    scribe show
"""

from pathlib import Path
from typing import Optional
import logging

import click

from scribe_toolkit.core.services.command_service import Command
from scribe_toolkit.core.services.selection_service import caret_at_end, select_node_contents
from scribe_toolkit.core.storage import JsonFileStore, get_default_store
from scribe_toolkit.logging_config import setup_logging
from scribe_toolkit.ui.controllers.editor_controller import EditorController

logger = logging.getLogger(__name__)


def _open_editor(ctx: click.Context) -> EditorController:
    store_path: Optional[str] = ctx.obj.get("store")
    store = JsonFileStore(Path(store_path)) if store_path else get_default_store()
    editor = EditorController(store=store)
    result = editor.initialize()
    if not result.success:
        raise click.ClickException(result.message)
    caret_at_end(editor.surface)
    return editor


def _save(editor: EditorController, outcome) -> None:
    if not outcome.success:
        raise click.ClickException(outcome.message)
    saved = editor.save_html_content()
    if not saved.success:
        raise click.ClickException(saved.message)
    click.echo(saved.message)


@click.group()
@click.option("--store", type=click.Path(dir_okay=False), default=None, help="JSON file holding the saved document")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ...)")
@click.pass_context
def main(ctx: click.Context, store: Optional[str], log_level: Optional[str]) -> None:
    """Edit the saved rich-text document."""
    setup_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj["store"] = store


@main.command()
@click.option("--page", is_flag=True, help="Wrap the markup in an escaped HTML page")
@click.pass_context
def show(ctx: click.Context, page: bool) -> None:
    """Print the saved markup."""
    editor = _open_editor(ctx)
    if page:
        click.echo(editor.preview_service.render_html_page(editor.surface).content or "")
    else:
        click.echo(editor.html_content)


@main.command("insert-table")
@click.option("--rows", default="3", help="Number of rows (1-10)")
@click.option("--cols", default="3", help="Number of columns (1-10)")
@click.pass_context
def insert_table(ctx: click.Context, rows: str, cols: str) -> None:
    """Append a table to the document."""
    editor = _open_editor(ctx)
    popup = editor.table_popup
    popup.open()
    popup.set_field("rows", rows)
    popup.set_field("cols", cols)
    _save(editor, popup.submit())


@main.command("insert-image")
@click.argument("url")
@click.option("--width", default="", help="Width in pixels")
@click.option("--height", default="", help="Height in pixels (needs --no-keep-aspect)")
@click.option("--keep-aspect/--no-keep-aspect", default=True, help="Keep the aspect ratio")
@click.pass_context
def insert_image(ctx: click.Context, url: str, width: str, height: str, keep_aspect: bool) -> None:
    """Append an image to the document."""
    editor = _open_editor(ctx)
    popup = editor.image_popup
    popup.open()
    popup.set_field("url", url)
    popup.set_field("width", width)
    popup.set_field("keep_aspect", keep_aspect)
    popup.set_field("height", height)
    _save(editor, popup.submit())


@main.command("insert-link")
@click.argument("url")
@click.option("--text", default="", help="Text to display (defaults to the URL)")
@click.pass_context
def insert_link(ctx: click.Context, url: str, text: str) -> None:
    """Append a link to the document."""
    editor = _open_editor(ctx)
    popup = editor.link_popup
    popup.open()
    popup.set_field("url", url)
    popup.set_field("text", text)
    _save(editor, popup.submit())


@main.command()
@click.argument("name", type=click.Choice([c.value for c in Command], case_sensitive=False))
@click.argument("value", required=False)
@click.pass_context
def command(ctx: click.Context, name: str, value: Optional[str]) -> None:
    """Apply a formatting command to the whole document."""
    editor = _open_editor(ctx)
    select_node_contents(editor.surface, editor.surface.root)
    _save(editor, editor.handle_command(name, value))


@main.command()
@click.pass_context
def clear(ctx: click.Context) -> None:
    """Delete the saved document."""
    store_path: Optional[str] = ctx.obj.get("store")
    store = JsonFileStore(Path(store_path)) if store_path else get_default_store()
    result = EditorController(store=store).persistence.clear()
    if not result.success:
        raise click.ClickException(result.message)
    click.echo(result.message)


if __name__ == "__main__":  # pragma: no cover
    main()
