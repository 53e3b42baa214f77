from pathlib import Path

import pytest
from helpers import build_test_font, make_fc_list_output

from fontpeek import font_source
from fontpeek.font_source import (
    FontconfigSource,
    FontDirectorySource,
    WindowsRegistrySource,
    clean_font_name,
    extract_font_family,
    make_font_source,
    parse_fc_list_output,
    read_font_families,
)


def test_parse_fc_list_keeps_order_and_first_family():
    stdout = "\n".join(
        [
            "DejaVu Sans",
            "Noto Sans CJK JP,Noto Sans CJK JP Regular",
            "",
            "Arial",
            "DejaVu Sans",
        ]
    )

    assert parse_fc_list_output(stdout) == [
        "DejaVu Sans",
        "Noto Sans CJK JP",
        "Arial",
        "DejaVu Sans",
    ]


def test_parse_fc_list_unescapes_names():
    assert parse_fc_list_output("Source Code Pro\\-Light\n") == ["Source Code Pro-Light"]


def test_extract_font_family_with_path_and_style():
    line = "/usr/share/fonts/foo.ttf: Foo Sans,Foo:style=Bold"

    assert extract_font_family(line) == "Foo Sans,Foo"


def test_fontconfig_source(monkeypatch):
    monkeypatch.setattr(
        "fontpeek.font_source.run_command",
        lambda argv: make_fc_list_output("Liberation Serif", "Cantarell"),
    )

    assert FontconfigSource().list_families() == ["Liberation Serif", "Cantarell"]


def test_fontconfig_source_command_failure(monkeypatch, capsys):
    monkeypatch.setattr(
        "fontpeek.font_source.run_command",
        lambda argv: make_fc_list_output("Fontconfig error", returncode=1),
    )

    assert FontconfigSource().list_families() == []
    assert "fc-list failed" in capsys.readouterr().out


def test_fontconfig_source_missing_tool(monkeypatch, capsys):
    def missing(argv):
        raise FileNotFoundError(argv[0])

    monkeypatch.setattr("fontpeek.font_source.run_command", missing)

    assert FontconfigSource().list_families() == []
    assert "'fc-list' not found" in capsys.readouterr().out


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Arial (TrueType)", "Arial"),
        ("Arial Bold Italic (TrueType)", "Arial"),
        ("Segoe UI Semibold (TrueType)", "Segoe UI"),
        ("Cambria & Cambria Math (TrueType)", "Cambria & Cambria Math"),
    ],
)
def test_clean_font_name(raw, expected):
    assert clean_font_name(raw) == expected


def test_registry_source_without_winreg(monkeypatch, capsys):
    monkeypatch.setattr(font_source, "winreg", None)

    assert WindowsRegistrySource().list_families() == []
    assert "registry is not available" in capsys.readouterr().out


def test_read_font_families_from_name_table(tmp_path):
    path = build_test_font(tmp_path / "test.ttf", "Test Family")

    assert read_font_families(path) == ["Test Family"]


def test_directory_source_reads_fonts_in_path_order(tmp_path):
    build_test_font(tmp_path / "b.ttf", "Beta Sans")
    build_test_font(tmp_path / "a-regular.ttf", "Alpha Serif")
    build_test_font(tmp_path / "a-bold.ttf", "Alpha Serif", style="Bold")
    (tmp_path / "notes.txt").write_text("not a font", encoding="utf-8")

    source = FontDirectorySource([tmp_path])

    assert source.list_families() == ["Alpha Serif", "Beta Sans"]


def test_directory_source_skips_broken_files(tmp_path, capsys):
    build_test_font(tmp_path / "good.ttf", "Good Font")
    (tmp_path / "broken.otf").write_bytes(b"not really a font")

    families = FontDirectorySource([tmp_path]).list_families()

    assert families == ["Good Font"]
    assert "skipping" in capsys.readouterr().out


def test_directory_source_missing_directory(tmp_path):
    source = FontDirectorySource([tmp_path / "nowhere"])

    assert source.list_families() == []


def test_make_font_source_choices(tmp_path):
    assert isinstance(make_font_source("fontconfig"), FontconfigSource)
    assert isinstance(make_font_source("registry"), WindowsRegistrySource)
    assert isinstance(make_font_source("directory", [tmp_path]), FontDirectorySource)
    # explicit directories win in auto mode
    source = make_font_source("auto", [tmp_path])
    assert isinstance(source, FontDirectorySource)
    assert source.font_dirs == [Path(tmp_path)]


def test_make_font_source_auto_on_linux(monkeypatch):
    monkeypatch.setattr(font_source, "IS_LINUX", True)
    monkeypatch.setattr(font_source, "IS_WINDOWS", False)

    assert isinstance(make_font_source("auto"), FontconfigSource)


def test_make_font_source_rejects_unknown():
    with pytest.raises(ValueError):
        make_font_source("psychic")
