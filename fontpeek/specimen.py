"""
Fontpeek – specimen.py
=====================

HTML specimen writer.

This module renders the controller's state (font list, font info, preview)
as a standalone HTML page, the markup counterpart of the Tk window.

Design principles
-----------------
- **Pure rendering stage**: reads the controller, never changes it.
- **Stable output**: the preview payload and templates are fixed so that
  pages can be compared across runs.
- **Escaping everywhere**: family names come from the system and are always
  escaped before reaching the markup.

IMPORTANT:
  The templates are used verbatim; whitespace inside ``<div class="preview">``
  is significant because the preview uses ``white-space: pre``.
"""

from __future__ import annotations

import html
import os
import platform
from datetime import datetime
from pathlib import Path

from fontpeek.controller import AppController, FontRow, ListView
from fontpeek.preview import LIST_SAMPLE_TEXT, PreviewOutput, css_font_family

# --- Configuration ---
DATE_STR = datetime.now().strftime("%Y%m%d")

HTML_INITIAL_CODE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
body {{ font-family: system-ui, sans-serif; margin: 0; display: flex; color: #1f2937; }}
#font-list {{ width: 280px; border-right: 1px solid #e5e7eb; }}
.font-item {{ padding: 6px 12px; border-bottom: 1px solid #f3f4f6; font-size: 11px; }}
.font-item.selected {{ background: #3b82f6; color: #fff; }}
.font-preview {{ font-size: 10px; color: inherit; opacity: 0.8; }}
.empty-state {{ padding: 20px; text-align: center; color: #9ca3af; font-size: 11px; }}
.empty-state.error {{ color: #ef4444; }}
main {{ flex: 1; padding: 16px; }}
.preview-text {{ white-space: pre; line-height: 1.6; padding: 16px; outline: none; }}
</style>
</head>
<body>
"""

HTML_END_CODE = """</body>
</html>
"""

FONT_ROW_BLOCK = """<div class="{css_class}" data-family="{family_attr}">
  <div class="font-name">{family}</div>
  <div class="font-preview" style="font-family: {css_family};">{sample}</div>
</div>"""

EMPTY_BLOCK = """<div class="{css_class}">{message}</div>"""


def get_unique_filename(base_name: str, extension: str) -> str:
    """Return a file name not yet on disk, adding a three-digit counter (000-999)."""
    for i in range(1000):
        filename = f"{base_name}_{i:03d}.{extension}"
        if not os.path.exists(filename):
            return filename
    raise ValueError(
        f"Cannot find a unique file name for {base_name}.{extension} after 1000 attempts."
    )


def render_font_row(row: FontRow) -> str:
    return FONT_ROW_BLOCK.format(
        css_class="font-item selected" if row.selected else "font-item",
        family_attr=html.escape(row.family, quote=True),
        family=html.escape(row.family, quote=False),
        css_family=html.escape(css_font_family(row.family), quote=True),
        sample=LIST_SAMPLE_TEXT,
    )


def render_font_list(view: ListView) -> str:
    """Render the list panel, including the empty and error states."""
    header = f'<div class="font-count">{view.count}</div>'
    if view.error_message:
        body = EMPTY_BLOCK.format(
            css_class="empty-state error",
            message=html.escape(view.error_message, quote=False),
        )
    elif view.empty_message:
        body = EMPTY_BLOCK.format(
            css_class="empty-state",
            message=html.escape(view.empty_message, quote=False),
        )
    else:
        body = "\n".join(render_font_row(row) for row in view.rows)
    return f'<aside id="font-list">\n{header}\n{body}\n</aside>\n'


def render_preview_panel(preview: PreviewOutput | None) -> str:
    if preview is None:
        return "<main></main>\n"
    info = (
        '<div id="font-info"><span class="font-family">'
        + html.escape(preview.family, quote=False)
        + f"</span> <span class=\"font-size\">{preview.font_size}px</span></div>"
    )
    return f"<main>\n{info}\n{preview.to_html()}\n</main>\n"


def generate_html(controller: AppController, title: str = "Fontpeek") -> str:
    """Generate the full specimen page for the controller's current state."""
    document = HTML_INITIAL_CODE.format(title=html.escape(title, quote=False))
    document += render_font_list(controller.list_view())
    document += render_preview_panel(controller.preview())
    document += HTML_END_CODE
    return document


def default_output_path() -> Path:
    base_name = f"fontpeek_{platform.system()}_{DATE_STR}"
    return Path(get_unique_filename(base_name, "html"))


def write_specimen(controller: AppController, output: Path | None = None) -> Path:
    """Write the specimen page and return its path."""
    path = output or default_output_path()
    path.write_text(generate_html(controller), encoding="utf-8")
    return path
