"""Tests for symbol list loading, URL matching and disambiguation recovery."""

import json
from pathlib import Path

import pytest

from docbundle.exceptions import ErrorCode, SymbolListError
from docbundle.schemas.catalog import Catalog, CatalogEntry, SymbolReference
from docbundle.services.nav_loader import load_nav_config
from docbundle.services.nav_walker import NavWalker
from docbundle.services.symbol_matcher import (
    SymbolMatcher,
    build_nav_path,
    load_symbol_references,
)

IOTA = "Language Reference Guide / Primitive Functions / Iota"
INDEX_GENERATOR = "Language Reference Guide / Primitive Functions / Index Generator"
RHO = "Language Reference Guide / Symbols / Rho"


def _entry(path: str, file: str, **kwargs) -> CatalogEntry:
    return CatalogEntry(path=path, file=file, title=kwargs.pop("title", path), content="", **kwargs)


def _catalog(*entries: CatalogEntry) -> Catalog:
    catalog = Catalog()
    for entry in entries:
        catalog.add(entry)
    return catalog


def _walked(root: Path) -> Catalog:
    catalog = Catalog()
    NavWalker(root, catalog).walk_config(load_nav_config(root / "mkdocs.yml"))
    return catalog


def _refs(*pairs) -> list:
    return [SymbolReference(symbol=s, url=u) for s, u in pairs]


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoadSymbolReferences:
    def test_loads_records(self, tmp_path):
        path = tmp_path / "symbol-urls.json"
        path.write_text(json.dumps([
            {"symbol": "⍳", "url": "/language-reference-guide/symbols/iota/"},
            {"symbol": "⍴", "url": "language-reference-guide/symbols/rho"},
        ]), encoding="utf-8")
        refs = load_symbol_references(path)
        assert [(r.symbol, r.url) for r in refs] == [
            ("⍳", "language-reference-guide/symbols/iota"),
            ("⍴", "language-reference-guide/symbols/rho"),
        ]

    def test_missing_file(self, tmp_path):
        with pytest.raises(SymbolListError) as exc_info:
            load_symbol_references(tmp_path / "nope.json")
        assert exc_info.value.error_code == ErrorCode.SYMBOL_LIST_INVALID

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "symbol-urls.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(SymbolListError, match="invalid JSON"):
            load_symbol_references(path)

    def test_malformed_records(self, tmp_path):
        path = tmp_path / "symbol-urls.json"
        path.write_text(json.dumps([{"symbol": "⍳"}, {"url": "x"}]), encoding="utf-8")
        with pytest.raises(SymbolListError, match="2 malformed"):
            load_symbol_references(path)

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "symbol-urls.json"
        path.write_text(json.dumps({"symbol": "⍳", "url": "x"}), encoding="utf-8")
        with pytest.raises(SymbolListError):
            load_symbol_references(path)


# ---------------------------------------------------------------------------
# Breadcrumbs from URLs
# ---------------------------------------------------------------------------


class TestBuildNavPath:
    def test_title_cases_every_segment(self):
        assert build_nav_path("language-reference-guide/symbols/rho") == RHO

    def test_keeps_existing_capitals(self):
        assert build_nav_path("guide/APL-files") == "Guide / APL Files"

    def test_single_segment(self):
        assert build_nav_path("iota") == "Iota"


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


class TestMatch:
    def test_index_uses_normalized_file_paths(self, monorepo):
        matcher = SymbolMatcher(_walked(monorepo), monorepo)
        assert matcher.index == {
            "": "index.md",
            "release-notes": "Release Notes",
            "language-reference-guide": "Language Reference Guide / About",
            "language-reference-guide/symbols/iota": IOTA,
            "language-reference-guide/primitive-functions/index-generator": INDEX_GENERATOR,
        }

    def test_exact(self, monorepo):
        matcher = SymbolMatcher(_walked(monorepo), monorepo)
        assert matcher.match("language-reference-guide/symbols/iota") == IOTA

    def test_suffix(self, monorepo):
        matcher = SymbolMatcher(_walked(monorepo), monorepo)
        assert matcher.match("symbols/iota") == IOTA
        assert matcher.match("primitive-functions/index-generator") == INDEX_GENERATOR

    def test_suffix_matches_whole_segments(self, monorepo):
        matcher = SymbolMatcher(_walked(monorepo), monorepo)
        assert matcher.match("iota") == IOTA
        assert matcher.match("ota") is None

    def test_index_is_not_a_prefix_of_index_generator(self):
        matcher = SymbolMatcher(
            _catalog(_entry("Index Generator", "lang/docs/primitives/index-generator.md")),
            Path("."),
        )
        assert matcher.match("lang/primitives/index") is None
        assert matcher.match("lang/primitives/index-generator") == "Index Generator"

    def test_section_index_tier(self):
        matcher = SymbolMatcher(Catalog(), Path("."))
        matcher.index["lang/primitives/index"] = "Primitives"
        assert matcher.match("lang/primitives") == "Primitives"

    def test_exact_beats_index_and_suffix(self):
        matcher = SymbolMatcher(Catalog(), Path("."))
        matcher.index.update({
            "a/lang/primitives": "Suffix",
            "lang/primitives/index": "Index",
            "lang/primitives": "Exact",
        })
        assert matcher.match("lang/primitives") == "Exact"
        del matcher.index["lang/primitives"]
        assert matcher.match("lang/primitives") == "Index"

    def test_suffix_tie_break_is_lexicographic(self):
        matcher = SymbolMatcher(
            _catalog(
                _entry("B", "b-site/docs/x/page.md"),
                _entry("A", "a-site/docs/x/page.md"),
            ),
            Path("."),
        )
        assert matcher.match("x/page") == "A"

    def test_first_entry_owns_normalized_path(self):
        matcher = SymbolMatcher(
            _catalog(
                _entry("First", "site/docs/page.md"),
                _entry("Second", "site/docs/page/index.md"),
            ),
            Path("."),
        )
        assert matcher.match("site/page") == "First"

    def test_no_match(self, monorepo):
        matcher = SymbolMatcher(_walked(monorepo), monorepo)
        assert matcher.match("language-reference-guide/symbols/rho") is None


# ---------------------------------------------------------------------------
# Recovery
# ---------------------------------------------------------------------------


class TestRecover:
    def test_recovers_orphan_page_as_excluded(self, monorepo):
        catalog = _walked(monorepo)
        matcher = SymbolMatcher(catalog, monorepo)
        added = matcher.recover(_refs(("⍴", "language-reference-guide/symbols/rho")))

        assert added == 1
        entry = catalog.get(RHO)
        assert entry.excluded is True
        assert entry.file == "language-reference-guide/docs/symbols/rho.md"
        assert entry.title == "Rho"
        assert "Shape or reshape." in entry.content
        assert matcher.match("language-reference-guide/symbols/rho") == RHO

    def test_recovers_section_index_page(self, make_tree):
        root = make_tree({"site/docs/operators/index.md": "Operators overview.\n"})
        catalog = Catalog()
        matcher = SymbolMatcher(catalog, root)
        assert matcher.recover(_refs(("∘", "site/operators"))) == 1
        entry = catalog.get("Site / Operators")
        assert entry.file == "site/docs/operators/index.md"
        assert entry.title == "operators"
        assert matcher.match("site/operators") == "Site / Operators"

    def test_matched_urls_are_not_recovered(self, monorepo):
        catalog = _walked(monorepo)
        matcher = SymbolMatcher(catalog, monorepo)
        assert matcher.recover(_refs(("⍳", "language-reference-guide/symbols/iota"))) == 0
        assert len(catalog) == 5

    def test_single_segment_and_missing_pages_are_skipped(self, monorepo):
        catalog = _walked(monorepo)
        matcher = SymbolMatcher(catalog, monorepo)
        refs = _refs(("?", "nowhere"), ("?", "language-reference-guide/symbols/nothing"))
        assert matcher.recover(refs) == 0
        assert len(catalog) == 5

    def test_recovered_page_visible_to_suffix_tier(self, monorepo):
        catalog = _walked(monorepo)
        matcher = SymbolMatcher(catalog, monorepo)
        assert matcher.match("symbols/iota") == IOTA
        assert matcher.match("symbols/rho") is None

        matcher.recover(_refs(("⍴", "language-reference-guide/symbols/rho")))
        assert matcher.match("symbols/rho") == RHO

    @pytest.mark.parametrize("url", ["../secret", "site/../../../docs/secret", "site/../../../secret/x"])
    def test_urls_outside_the_tree_are_not_recovered(self, tmp_path, make_tree, url):
        root = make_tree({"site/docs/page.md": "# Page\n"})
        (tmp_path / "docs").mkdir()
        (tmp_path / "docs" / "secret.md").write_text("# Secret\n", encoding="utf-8")
        (tmp_path / "secret" / "x").mkdir(parents=True)
        (tmp_path / "secret" / "x" / "index.md").write_text("# Secret\n", encoding="utf-8")

        catalog = Catalog()
        matcher = SymbolMatcher(catalog, root)
        assert matcher.recover(_refs(("?", url))) == 0
        assert len(catalog) == 0

    def test_dot_segments_inside_the_tree_are_normalized(self, make_tree):
        root = make_tree({"site/docs/page.md": "# Page\n"})
        catalog = Catalog()
        matcher = SymbolMatcher(catalog, root)
        assert matcher.recover(_refs(("?", "site/sub/../page"))) == 1
        assert catalog.entries()[0].file == "site/docs/page.md"

    def test_collision_is_not_indexed(self, make_tree):
        root = make_tree({"site/docs/a.md": "# Orphan\n"})
        catalog = _catalog(_entry("Site / A", "other/docs/elsewhere.md", title="Kept"))
        matcher = SymbolMatcher(catalog, root)
        assert matcher.recover(_refs(("x", "site/a"))) == 0
        assert catalog.get("Site / A").title == "Kept"
        assert "site/a" not in matcher.index


# ---------------------------------------------------------------------------
# Association
# ---------------------------------------------------------------------------


class TestResolve:
    def test_recover_then_associate(self, monorepo):
        catalog = _walked(monorepo)
        matcher = SymbolMatcher(catalog, monorepo)
        associations = matcher.resolve(_refs(
            ("⍳", "language-reference-guide/symbols/iota"),
            ("⍴", "language-reference-guide/symbols/rho"),
            ("⌹", "language-reference-guide/symbols/domino"),
        ))
        assert [(a.symbol, a.path) for a in associations] == [("⍳", IOTA), ("⍴", RHO)]
        assert matcher.stats.parsed == 3
        assert matcher.stats.recovered == 1
        assert matcher.stats.matched == 2
        assert matcher.stats.unmatched == 1

    def test_first_association_per_symbol_wins(self, monorepo):
        matcher = SymbolMatcher(_walked(monorepo), monorepo)
        associations = matcher.associate(_refs(
            ("⍳", "language-reference-guide/symbols/iota"),
            ("⍳", "language-reference-guide/primitive-functions/index-generator"),
        ))
        assert [(a.symbol, a.path) for a in associations] == [("⍳", IOTA)]
        assert matcher.stats.duplicate_symbols == 1
