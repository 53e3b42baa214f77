"""
Fontpeek – font_source.py
========================

Font discovery collaborators.

Every source exposes a single operation, :meth:`list_families`, returning the
installed font family names as a flat, ordered list of strings.

Design principles
-----------------
- **Order-preserving**: names are returned in the order the platform reports
  them. Sorting, if any, is the platform's business.
- **Failure-tolerant**: missing tools or failing commands are reported with a
  warning and yield an empty list. Only unexpected exceptions escape, and the
  catalog turns those into ``SourceUnavailable``.
- **No font rendering**: at most the ``name`` table is read.

Available sources:

- ``FontconfigSource``: Linux, ``fc-list :family``
- ``WindowsRegistrySource``: Windows, the ``Fonts`` registry keys
- ``FontDirectorySource``: any platform, walks font directories with fontTools
"""

from __future__ import annotations

import os
import re
import subprocess
import sys
from collections import OrderedDict
from pathlib import Path
from typing import Protocol

# fontTools does not provide type stubs/py.typed
from fontTools.ttLib import TTCollection, TTFont  # type: ignore[import]

# Platform-specific imports (deferred)
if sys.platform == "win32":
    import winreg
else:
    winreg = None

IS_LINUX = sys.platform.startswith("linux")
IS_WINDOWS = sys.platform == "win32"
IS_MACOS = sys.platform == "darwin"

# --- Configuration ---
SOURCE_CHOICES = ("auto", "fontconfig", "registry", "directory")

FONT_EXTENSIONS = {".ttf", ".otf", ".ttc", ".otc", ".woff"}

WINDOWS_REGISTRY_PATHS = [
    r"SOFTWARE\Microsoft\Windows NT\CurrentVersion\Fonts",
    r"SOFTWARE\WOW6432Node\Microsoft\Windows NT\CurrentVersion\Fonts",
]

NAME_ID_FAMILY = 1
NAME_ID_TYPOGRAPHIC_FAMILY = 16


class FontSource(Protocol):
    def list_families(self) -> list[str]: ...


def run_command(argv: list[str]) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        argv,
        text=True,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        check=False,
    )


# ============================================================
# Name helpers
# ============================================================


def clean_font_name(name: str) -> str:
    """Normalize a raw registry font name to a family-like base name.

    Removes parenthetical hints like ``(TrueType)`` and strips common
    variant suffixes (Bold, Italic, etc.).
    """
    clean_name = re.sub(r"\s*\((TrueType|OpenType|True Type|Type 1)\)\s*$", "", name)

    variants = r"\s+(Bold|Italic|Light|Regular|Medium|Semibold|Black|Thin|Heavy|Narrow|Condensed|Extended).*$"
    return re.sub(variants, "", clean_name, flags=re.IGNORECASE).strip()


def extract_font_family(line: str) -> str:
    """Extract the family portion from an ``fc-list`` line.

    Accepts both ``Family`` (``fc-list :family``) and
    ``/path/font.ttf:Family:style`` layouts. Comma-separated alternates
    (localized names) are left intact.
    """
    parts = line.split(":")
    if len(parts) == 1:
        return parts[0].strip()
    return parts[1].strip()


def parse_fc_list_output(stdout: str) -> list[str]:
    """Return the primary family of every ``fc-list`` line, in output order.

    FontConfig lists localized alternates after a comma
    (``"Noto Sans CJK JP,Noto Sans CJK JP Regular"``); only the first name is
    kept so that every line becomes exactly one family. FontConfig escapes
    ``-`` and ``\\`` with a backslash; escapes are removed.
    """
    families: list[str] = []
    for line in stdout.splitlines():
        family_part = extract_font_family(line)
        first = re.sub(r"\\(.)", r"\1", family_part.split(",")[0]).strip()
        if first:
            families.append(first)
    return families


def _unique_in_order(names: list[str]) -> list[str]:
    return list(OrderedDict.fromkeys(names))


# ============================================================
# Sources
# ============================================================


class FontconfigSource:
    """Linux font discovery using FontConfig (``fc-list``)."""

    def list_families(self) -> list[str]:
        try:
            proc = run_command(["fc-list", ":family"])
        except FileNotFoundError:
            print("⚠️  Warning: 'fc-list' not found. Make sure fontconfig is installed.")
            return []

        if proc.returncode != 0:
            print(f"⚠️  Warning: fc-list failed:\n{proc.stdout}")
            return []

        return parse_fc_list_output(proc.stdout)


class WindowsRegistrySource:
    """Windows font discovery through the registry ``Fonts`` keys.

    Registry values are per file (``Arial Bold (TrueType)``), so variant
    suffixes are stripped and each family is reported once, at its first
    occurrence.
    """

    def list_families(self) -> list[str]:
        if winreg is None:
            print("⚠️  Warning: the Windows registry is not available on this system.")
            return []

        names: list[str] = []
        for path in WINDOWS_REGISTRY_PATHS:
            try:
                with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, path) as key:
                    for i in range(winreg.QueryInfoKey(key)[1]):
                        name, value, _ = winreg.EnumValue(key, i)
                        if re.search(r"\.(ttf|otf|ttc|fon)$", value, re.IGNORECASE):
                            base_name = clean_font_name(name)
                            if base_name:
                                names.append(base_name)
            except FileNotFoundError:
                continue

        return _unique_in_order(names)


def default_font_dirs() -> list[Path]:
    r"""Known font directories for the current platform (system + user).

    Windows supports per-user font installs under
    ``%LOCALAPPDATA%\Microsoft\Windows\Fonts``.
    """
    dirs: list[Path] = []
    home = Path.home()
    if IS_WINDOWS:
        windir = os.environ.get("WINDIR") or os.environ.get("SystemRoot")
        if windir:
            dirs.append(Path(windir) / "Fonts")
        local = os.environ.get("LOCALAPPDATA")
        if local:
            dirs.append(Path(local) / "Microsoft" / "Windows" / "Fonts")
    elif IS_MACOS:
        dirs += [
            Path("/System/Library/Fonts"),
            Path("/Library/Fonts"),
            home / "Library" / "Fonts",
        ]
    else:
        dirs += [
            Path("/usr/share/fonts"),
            Path("/usr/local/share/fonts"),
            home / ".local" / "share" / "fonts",
            home / ".fonts",
        ]
    return [d for d in dirs if d.exists()]


def _best_family(tt: TTFont) -> str | None:
    """Return the typographic family (nameID 16), falling back to nameID 1."""
    if "name" not in tt:
        return None
    name_table = tt["name"]
    for name_id in (NAME_ID_TYPOGRAPHIC_FAMILY, NAME_ID_FAMILY):
        rec = name_table.getDebugName(name_id)
        if rec and rec.strip():
            return rec.strip()
    return None


def read_font_families(path: Path) -> list[str]:
    """Read the family name of every face stored in ``path``.

    TrueType/OpenType collections contribute one name per face.
    """
    if path.suffix.lower() in (".ttc", ".otc"):
        collection = TTCollection(str(path), lazy=True)
        try:
            faces = list(collection.fonts)
            return [fam for fam in (_best_family(tt) for tt in faces) if fam]
        finally:
            collection.close()

    tt = TTFont(str(path), lazy=True)
    try:
        fam = _best_family(tt)
        return [fam] if fam else []
    finally:
        tt.close()


class FontDirectorySource:
    """Walk font directories and read family names with fontTools.

    Files are visited in sorted path order per directory. Files that fontTools
    cannot open are skipped with a warning.
    """

    def __init__(self, font_dirs: list[Path] | None = None, verbose: bool = False):
        self.font_dirs = list(font_dirs) if font_dirs else default_font_dirs()
        self.verbose = verbose

    def font_files(self) -> list[Path]:
        files: list[Path] = []
        for d in self.font_dirs:
            try:
                found = sorted(
                    p
                    for p in Path(d).rglob("*")
                    if p.is_file() and p.suffix.lower() in FONT_EXTENSIONS
                )
            except OSError as e:
                print(f"⚠️  Warning: cannot scan {d}: {e}")
                continue
            files.extend(found)
        return files

    def list_families(self) -> list[str]:
        files = self.font_files()
        if self.verbose:
            print(f"Discovered {len(files)} font files")

        names: list[str] = []
        for font_path in files:
            try:
                names.extend(read_font_families(font_path))
            except Exception as e:
                print(f"⚠️  Warning: skipping {font_path}: {e}")
        return _unique_in_order(names)


def make_font_source(
    kind: str = "auto",
    font_dirs: list[Path] | None = None,
    verbose: bool = False,
) -> FontSource:
    """Build the font source named by ``kind``.

    ``auto`` dispatches by platform: FontConfig on Linux, the registry on
    Windows, font directories elsewhere. Explicit ``font_dirs`` always select
    the directory source.
    """
    if kind not in SOURCE_CHOICES:
        raise ValueError(f"Unknown font source '{kind}'")

    if kind == "directory" or (kind == "auto" and font_dirs):
        return FontDirectorySource(font_dirs, verbose=verbose)
    if kind == "fontconfig":
        return FontconfigSource()
    if kind == "registry":
        return WindowsRegistrySource()

    if IS_LINUX:
        return FontconfigSource()
    if IS_WINDOWS:
        return WindowsRegistrySource()
    return FontDirectorySource(verbose=verbose)
