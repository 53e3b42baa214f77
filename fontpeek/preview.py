"""
Fontpeek – preview.py
====================

Preview renderer: turns the selected font and the preview configuration into
an editable specimen block.

The demonstration payload (``PREVIEW_SAMPLE_TEXT``) is fixed. Visual
regression comparisons rely on it, so it must stay byte-identical: Latin
alphabet, digits, punctuation, arrow/ligature-style symbol sequences and a
block of private-use-area codepoints probing icon fonts (Nerd Font /
Material Design Icons range).
"""

from __future__ import annotations

import html
from dataclasses import dataclass

from fontpeek.catalog import FontEntry

# --- Configuration ---
MIN_FONT_SIZE = 8
MAX_FONT_SIZE = 72
FONT_SIZE_STEP = 2
DEFAULT_FONT_SIZE = 16

FALLBACK_FAMILY = "sans-serif"

LIST_SAMPLE_TEXT = "The quick brown fox jumps"

PREVIEW_SAMPLE_TEXT = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ\n"
    "abcdefghijklmnopqrstuvwxyz\n"
    "0123456789 !@#$%^&*()\n"
    "\n"
    "Symbols:\n"
    "→ ← ≠ >= <= != == === => ->\n"
    "<- -> => == != <= >= && || ++ -- += -= *= /= %= **= ??\n"
    "<> </> </ /> <!-- --> /*  */ /** */ // /// ///\n"
    "\n"
    "Icons:\n"
    "\U000f0219 \U000f0a1c \U000f040a \U000f059f \U000f062e "
    "\U000f033d \U000f07d5 \U000f0109 \U000f19b0\n"
    "\U000f046e \U000f031b \U000f0c33 \U000f0734 \U000f1a44 "
    "\U000f07c3 \U000f01e5 \U000f0beb \U000f0497"
)


def clamp_font_size(size: int) -> int:
    return max(MIN_FONT_SIZE, min(MAX_FONT_SIZE, int(size)))


def step_font_size(size: int, steps: int) -> int:
    """Move ``size`` by ``steps`` increments of ``FONT_SIZE_STEP``, clamped."""
    return clamp_font_size(size + steps * FONT_SIZE_STEP)


def css_font_family(family: str) -> str:
    """CSS ``font-family`` value with the generic fallback appended."""
    quoted = family.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{quoted}', {FALLBACK_FAMILY}"


@dataclass
class PreviewConfig:
    font_size: int = DEFAULT_FONT_SIZE
    family: str = ""

    def __post_init__(self) -> None:
        self.font_size = clamp_font_size(self.font_size)

    def set_font_size(self, size: int) -> int:
        self.font_size = clamp_font_size(size)
        return self.font_size

    def increase(self) -> int:
        self.font_size = step_font_size(self.font_size, 1)
        return self.font_size

    def decrease(self) -> int:
        self.font_size = step_font_size(self.font_size, -1)
        return self.font_size


@dataclass(frozen=True)
class PreviewOutput:
    family: str
    font_size: int
    text: str = PREVIEW_SAMPLE_TEXT
    editable: bool = True

    @property
    def css_font_family(self) -> str:
        return css_font_family(self.family)

    def to_html(self) -> str:
        """Contenteditable markup; whitespace is preserved by ``pre`` styling."""
        style = f"font-family: {self.css_font_family}; font-size: {self.font_size}px;"
        return (
            '<div class="preview-text" contenteditable="'
            + ("true" if self.editable else "false")
            + '" style="'
            + html.escape(style, quote=True)
            + '">'
            + html.escape(self.text, quote=False)
            + "</div>"
        )


def render_preview(
    selection: FontEntry | None, config: PreviewConfig
) -> PreviewOutput | None:
    """Render the specimen block for ``selection``; ``None`` when nothing is selected."""
    if selection is None:
        return None
    config.family = selection.family
    return PreviewOutput(family=selection.family, font_size=config.font_size)
