import hashlib

import pytest

from fontpeek.catalog import FontEntry
from fontpeek.preview import (
    DEFAULT_FONT_SIZE,
    MAX_FONT_SIZE,
    MIN_FONT_SIZE,
    PREVIEW_SAMPLE_TEXT,
    PreviewConfig,
    clamp_font_size,
    css_font_family,
    render_preview,
    step_font_size,
)


def test_six_increments_from_12_reach_24():
    config = PreviewConfig(font_size=12)

    for _ in range(6):
        config.increase()

    assert config.font_size == 24


def test_decrement_at_minimum_is_clamped():
    config = PreviewConfig(font_size=8)

    assert config.decrease() == 8


def test_increment_at_maximum_is_clamped():
    config = PreviewConfig(font_size=72)

    assert config.increase() == 72


def test_odd_size_near_maximum_clamps_to_maximum():
    config = PreviewConfig(font_size=71)

    assert config.increase() == MAX_FONT_SIZE


@pytest.mark.parametrize(
    "requested, expected",
    [(0, MIN_FONT_SIZE), (-40, MIN_FONT_SIZE), (100, MAX_FONT_SIZE), (30, 30)],
)
def test_clamp_font_size(requested, expected):
    assert clamp_font_size(requested) == expected


def test_config_clamps_initial_size():
    assert PreviewConfig(font_size=500).font_size == MAX_FONT_SIZE
    assert PreviewConfig().font_size == DEFAULT_FONT_SIZE


def test_step_font_size_multiple_steps():
    assert step_font_size(12, 3) == 18
    assert step_font_size(12, -10) == MIN_FONT_SIZE


def test_render_without_selection_returns_none():
    assert render_preview(None, PreviewConfig()) is None


def test_render_with_selection():
    config = PreviewConfig(font_size=20)

    output = render_preview(FontEntry("Fira Code"), config)

    assert output.family == "Fira Code"
    assert output.font_size == 20
    assert output.editable is True
    assert output.text == PREVIEW_SAMPLE_TEXT
    assert config.family == "Fira Code"


def test_sample_text_content():
    lines = PREVIEW_SAMPLE_TEXT.split("\n")

    assert lines[0] == "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    assert lines[1] == "abcdefghijklmnopqrstuvwxyz"
    assert lines[2] == "0123456789 !@#$%^&*()"
    assert "Symbols:" in lines
    assert "Icons:" in lines
    assert "/*  */" in PREVIEW_SAMPLE_TEXT


def test_sample_text_icon_block_is_private_use():
    icons = PREVIEW_SAMPLE_TEXT.split("Icons:\n", 1)[1].split()

    assert len(icons) == 18
    assert all(0xF0000 <= ord(glyph) <= 0xFFFFD for glyph in icons)
    assert icons[0] == "\U000f0219"
    assert icons[-1] == "\U000f0497"


def test_sample_text_is_byte_stable():
    data = PREVIEW_SAMPLE_TEXT.encode("utf-8")

    assert len(PREVIEW_SAMPLE_TEXT) == 259
    assert len(data) == 319
    assert not data.endswith(b"\n")
    assert hashlib.sha256(data).hexdigest() == (
        "de1fbeb12b9ab0c6e491b638cf6db908d76604028ce6db4a4181e1d9b156184c"
    )


def test_css_font_family_quotes_family():
    assert css_font_family("Arial") == "'Arial', sans-serif"
    assert css_font_family("Bob's Font") == "'Bob\\'s Font', sans-serif"


def test_preview_html_escapes_payload():
    output = render_preview(FontEntry("Arial"), PreviewConfig(font_size=14))

    markup = output.to_html()

    assert 'contenteditable="true"' in markup
    assert "font-size: 14px;" in markup
    assert "&lt;!-- --&gt;" in markup
    assert "<!--" not in markup
    assert "&amp;&amp; ||" in markup
