import pytest
from helpers import FailingSource, StaticSource

from fontpeek.catalog import (
    CatalogStore,
    FontEntry,
    SourceUnavailable,
    fetch_families,
    filter_fonts,
)

FAMILIES = ["Arial", "DejaVu Sans", "Noto Sans Mono", "Arial Black", "Courier New"]


def entries(*names):
    return [FontEntry(n) for n in names]


def test_filter_fonts_case_insensitive_substring():
    fonts = entries(*FAMILIES)

    result = filter_fonts(fonts, "SANS")

    assert [f.family for f in result] == ["DejaVu Sans", "Noto Sans Mono"]


def test_filter_fonts_preserves_catalog_order():
    fonts = entries(*FAMILIES)

    result = filter_fonts(fonts, "ar")

    # "Courier New" does not contain "ar"; order follows the catalog, not relevance
    assert [f.family for f in result] == ["Arial", "Arial Black"]


def test_filter_fonts_result_is_subsequence():
    fonts = entries(*FAMILIES)

    for query in ["", "a", "o", "mono", "zzz", " "]:
        result = filter_fonts(fonts, query)
        it = iter(fonts)
        assert all(any(f is c for c in it) for f in result)
        assert result == [f for f in fonts if query.lower() in f.family.lower()]


def test_filter_fonts_empty_query_returns_everything():
    fonts = entries(*FAMILIES)

    assert filter_fonts(fonts, "") == fonts


def test_filter_fonts_no_match():
    assert filter_fonts(entries(*FAMILIES), "Nonexistent") == []


def test_catalog_load_initializes_filtered_view():
    store = CatalogStore()

    catalog = store.load(StaticSource(FAMILIES))

    assert [f.family for f in catalog] == FAMILIES
    assert store.filtered == list(catalog)
    assert store.loaded


def test_catalog_keeps_duplicates_and_drops_blank_names():
    store = CatalogStore()

    store.load(StaticSource(["Arial", "  ", "Arial", " Courier New "]))

    assert [f.family for f in store.catalog] == ["Arial", "Arial", "Courier New"]


def test_catalog_empty_source():
    store = CatalogStore()

    store.load(StaticSource([]))

    assert store.catalog == ()
    assert store.set_query("a") == []
    assert store.set_query("") == []


def test_catalog_load_failure_raises_source_unavailable():
    store = CatalogStore()

    with pytest.raises(SourceUnavailable, match="font service crashed"):
        store.load(FailingSource())

    assert store.catalog == ()
    assert not store.loaded


def test_catalog_is_write_once():
    store = CatalogStore()
    store.load(StaticSource(FAMILIES))

    with pytest.raises(RuntimeError):
        store.load(StaticSource(["Other"]))

    assert [f.family for f in store.catalog] == FAMILIES


def test_query_typed_before_load_applies_after_load():
    store = CatalogStore()
    store.set_query("sans")

    store.load(StaticSource(FAMILIES))

    assert [f.family for f in store.filtered] == ["DejaVu Sans", "Noto Sans Mono"]


def test_set_query_recomputes_from_full_catalog():
    store = CatalogStore()
    store.load(StaticSource(FAMILIES))

    store.set_query("arial black")
    result = store.set_query("")

    assert [f.family for f in result] == FAMILIES


def test_fetch_families_leaves_store_untouched():
    source = StaticSource(["Arial", "Courier New"])

    assert fetch_families(source) == ["Arial", "Courier New"]
    assert source.calls == 1


def test_fetch_families_wraps_source_errors():
    with pytest.raises(SourceUnavailable, match="font service crashed"):
        fetch_families(FailingSource())


def test_set_catalog_installs_fetched_names_once():
    store = CatalogStore()
    store.set_query("cour")

    store.set_catalog(["Arial", " Courier New "])

    assert store.filtered == [FontEntry("Courier New")]
    with pytest.raises(RuntimeError):
        store.set_catalog(["Arial"])
