"""
Fontpeek – catalog.py
====================

Catalog store, filter engine and selection model.

The catalog is the ordered list of font families reported by a font source.
It is written once per session and never mutated afterwards; the filtered view
and the selection are derived from it.

Design principles
-----------------
- **Source order**: presentation order is exactly the font source order. No
  sorting, no deduplication.
- **Total operations**: filtering and selection never fail once the catalog is
  loaded. Unknown families and empty queries are normal states.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from fontpeek.font_source import FontSource


class SourceUnavailable(Exception):
    """The font source call failed or raised."""


@dataclass(frozen=True)
class FontEntry:
    family: str


def as_font_entries(names: Iterable[object]) -> tuple[FontEntry, ...]:
    """Turn raw source names into entries.

    Names are stripped; empty names are dropped. Duplicates are kept.
    """
    out: list[FontEntry] = []
    for name in names:
        family = str(name).strip()
        if family:
            out.append(FontEntry(family))
    return tuple(out)


def fetch_families(source: FontSource) -> list[str]:
    """Query ``source`` for its family names.

    Touches no state, so it may run on a worker thread.

    Raises:
        SourceUnavailable: the source call raised.
    """
    try:
        return list(source.list_families() or [])
    except Exception as e:
        raise SourceUnavailable(str(e) or type(e).__name__) from e


def filter_fonts(fonts: Sequence[FontEntry], query: str) -> list[FontEntry]:
    """Return the entries whose family contains ``query``, case-insensitively.

    The result keeps the order of ``fonts``. An empty query returns every entry.
    """
    q = query.lower()
    if not q:
        return list(fonts)
    return [font for font in fonts if q in font.family.lower()]


class CatalogStore:
    """Holds the write-once catalog and the current filtered view."""

    def __init__(self) -> None:
        self._catalog: tuple[FontEntry, ...] | None = None
        self.query = ""
        self.filtered: list[FontEntry] = []

    @property
    def loaded(self) -> bool:
        return self._catalog is not None

    @property
    def catalog(self) -> tuple[FontEntry, ...]:
        return self._catalog or ()

    def load(self, source: FontSource) -> tuple[FontEntry, ...]:
        """Populate the catalog from ``source``.

        Raises:
            SourceUnavailable: the source call raised.
            RuntimeError: the catalog was already loaded.
        """
        if self._catalog is not None:
            raise RuntimeError("font catalog is already loaded")
        return self.set_catalog(fetch_families(source))

    def set_catalog(self, names: Iterable[object]) -> tuple[FontEntry, ...]:
        """Install already fetched family names as the catalog."""
        if self._catalog is not None:
            raise RuntimeError("font catalog is already loaded")

        self._catalog = as_font_entries(names or [])
        self.filtered = filter_fonts(self._catalog, self.query)
        return self._catalog

    def set_query(self, query: str) -> list[FontEntry]:
        self.query = query
        self.filtered = filter_fonts(self.catalog, query)
        return self.filtered

    def find(self, family: str) -> FontEntry | None:
        for font in self.catalog:
            if font.family == family:
                return font
        return None


class SelectionModel:
    """Single-select model; the selection is always a catalog member."""

    def __init__(self, store: CatalogStore) -> None:
        self._store = store
        self.current: FontEntry | None = None

    def select(self, family: str) -> bool:
        """Select ``family``; a family missing from the catalog is a no-op."""
        entry = self._store.find(family)
        if entry is None:
            return False
        self.current = entry
        return True

    def is_selected(self, family: str) -> bool:
        return self.current is not None and self.current.family == family
