"""Tests for catalog persistence and the three-tier search.

The database is built once per test from the shared monorepo fixture, so
rowids follow catalog order:

    1 index.md                2 Release Notes          3 About
    4 Iota                    5 Index Generator        6 Rho (excluded)
"""

import json

import pytest

from docbundle.exceptions import CatalogNotFoundError, DocumentNotFoundError
from docbundle.repositories import CatalogRepository, SearchHit, escape_fts_query
from docbundle.schemas.catalog import CatalogEntry, SymbolAssociation
from docbundle.services.catalog_service import CatalogBuildResult, CatalogService
from docbundle.services.catalog_store import write_catalog
from docbundle.services.search_service import SearchService, open_catalog

IOTA = "Language Reference Guide / Primitive Functions / Iota"
RHO = "Language Reference Guide / Symbols / Rho"


@pytest.fixture()
def catalog_db(monorepo, tmp_path, fts5):
    symbols = tmp_path / "symbol-urls.json"
    symbols.write_text(json.dumps([
        {"symbol": "⍳", "url": "language-reference-guide/symbols/iota"},
        {"symbol": "⍴", "url": "language-reference-guide/symbols/rho"},
    ]), encoding="utf-8")
    result = CatalogService().build(monorepo, symbols)
    path = tmp_path / "out" / "docs.db"
    write_catalog(result, path)
    return path


@pytest.fixture()
def service(catalog_db):
    with open_catalog(catalog_db) as db:
        yield SearchService(db)


def test_escape_fts_query():
    assert escape_fts_query('say "hi"') == '"say ""hi"""'


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


class TestWriteCatalog:
    def test_rows_and_order(self, service):
        repo = service.repo
        assert repo.count() == 6
        assert repo.count(include_excluded=False) == 5
        assert repo.list_paths() == [
            "index.md",
            "Release Notes",
            "Language Reference Guide / About",
            IOTA,
            "Language Reference Guide / Primitive Functions / Index Generator",
        ]
        assert repo.list_paths(include_excluded=True)[-1] == RHO

    def test_existing_file_is_replaced(self, catalog_db, fts5):
        entry = CatalogEntry(path="Only", file="docs/only.md", title="Only", content="x")
        write_catalog(CatalogBuildResult(entries=[entry]), catalog_db)
        with open_catalog(catalog_db) as db:
            assert CatalogRepository(db).list_paths() == ["Only"]

    def test_duplicate_rows_are_ignored(self, tmp_path, fts5):
        entries = [
            CatalogEntry(path="Same", file="a.md", title="First", content="a"),
            CatalogEntry(path="Same", file="b.md", title="Second", content="b"),
        ]
        links = [
            SymbolAssociation(symbol="⍳", path="Same"),
            SymbolAssociation(symbol="⍳", path="Other"),
        ]
        path = tmp_path / "dupes.db"
        write_catalog(CatalogBuildResult(entries=entries, associations=links), path)
        with open_catalog(path) as db:
            service = SearchService(db)
            assert service.repo.count() == 1
            assert service.lookup_symbol("⍳") == SearchHit(rowid=1, title="First", path="Same")


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


class TestSearch:
    def test_keyword_tier(self, service):
        hits = service.search("⍳")
        assert [h.path for h in hits] == [IOTA]

    def test_keywords_are_case_insensitive(self, service):
        assert [h.rowid for h in service.search("IOTA")] == [4]

    def test_title_tier_before_content_tier(self, service):
        hits = service.search("index generator")
        # Title match on Index Generator, then the Iota page mentioning it
        assert [h.rowid for h in hits] == [5, 4]

    def test_document_found_once(self, service):
        # Iota matches keywords, title and content
        assert [h.rowid for h in service.search("iota")] == [4]

    def test_excluded_pages_are_searchable(self, service):
        assert [h.path for h in service.search("reshape")] == [RHO]

    def test_limit(self, service):
        assert [h.rowid for h in service.search("index generator", limit=1)] == [5]
        assert service.search("index generator", limit=0) == []

    def test_blank_query(self, service):
        assert service.search("   ") == []

    def test_quotes_do_not_break_fts(self, service):
        assert service.search('"') == []
        assert [h.rowid for h in service.search('index "generator')] == [5, 4]

    def test_symbol_only_query_skips_full_text(self, service):
        assert service.repo.search_fts("title", "⍳", 10, set()) == []

    def test_unknown_column(self, service):
        with pytest.raises(ValueError):
            service.repo.search_fts("file", "x", 10, set())

    def test_no_hits(self, service):
        assert service.search("nonexistentword") == []


class TestFetch:
    def test_fetch_content(self, service):
        content = service.fetch(5)
        assert content.startswith("# Index Generator")

    def test_missing_rowid(self, service):
        with pytest.raises(DocumentNotFoundError):
            service.fetch(999)


class TestLookupSymbol:
    def test_linked_document(self, service):
        hit = service.lookup_symbol("⍴")
        assert hit.path == RHO
        assert hit.rowid == 6
        assert hit.title == "Rho"

    def test_unknown_symbol(self, service):
        assert service.lookup_symbol("⌹") is None


def test_missing_database(tmp_path):
    with pytest.raises(CatalogNotFoundError):
        with open_catalog(tmp_path / "missing.db"):
            pass
