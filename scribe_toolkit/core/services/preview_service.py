from __future__ import annotations

from dataclasses import dataclass
import logging
from html import escape
from typing import Optional, Dict, Any

from scribe_toolkit.core.models.surface import EditableSurface

logger = logging.getLogger(__name__)

__all__ = ["PreviewResult", "PreviewService"]


@dataclass
class PreviewResult:
    """Structured result for preview-oriented operations.

    Attributes
    ----------
    success : bool
        Indicates whether the operation completed successfully.
    content : Optional[str]
        Result payload when successful (raw markup or an HTML page).
    message : str
        Human-readable outcome message. Clear on failure, brief on success.
    details : Optional[Dict[str, Any]]
        Structured ancillary data (e.g., lengths, error kinds).
    """
    success: bool
    content: Optional[str]
    message: str
    details: Optional[Dict[str, Any]] = None


class PreviewService:
    """Produces the live raw-markup preview shown below the editor.

    The preview is the serialized surface content, exactly what a save would
    persist. ``render_html_page`` wraps it, escaped, into a standalone page
    so the markup can be read in a browser rather than rendered.

    Examples
    --------
    >>> service = PreviewService()
    >>> service.render_raw(EditableSurface("<p>a</p>")).content
    '<p>a</p>'
    """

    def render_raw(self, surface: Optional[EditableSurface]) -> PreviewResult:
        if surface is None:
            logger.info("Preview FAIL: no surface")
            return PreviewResult(False, None, "No editor surface available.", {"reason": "no_surface"})
        markup = surface.inner_html
        logger.debug("Preview OK: render_raw len=%d", len(markup))
        return PreviewResult(True, markup, "", {"length": len(markup)})

    def render_html_page(self, surface: Optional[EditableSurface]) -> PreviewResult:
        """Render the raw markup as an escaped, preformatted HTML page."""
        raw = self.render_raw(surface)
        if not raw.success or raw.content is None:
            return raw
        return PreviewResult(True, self._markup_to_page(raw.content), "", raw.details)

    def _markup_to_page(self, markup: str) -> str:
        escaped = escape(markup, quote=False)
        return (
            "<!DOCTYPE html>\n"
            "<html lang=\"en\">\n"
            "  <head>\n"
            "    <meta charset=\"utf-8\" />\n"
            "    <title>HTML Output</title>\n"
            "    <style>\n"
            "      body { font-family: system-ui, -apple-system, Segoe UI, Roboto, Arial, sans-serif; margin: 0; padding: 1rem; }\n"
            "      pre { white-space: pre-wrap; word-break: break-word; background: #f6f8fa; padding: 1rem; border-radius: 6px; }\n"
            "    </style>\n"
            "  </head>\n"
            "  <body>\n"
            "    <pre>"
            f"{escaped}"
            "</pre>\n"
            "  </body>\n"
            "</html>\n"
        )
