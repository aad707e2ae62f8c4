"""Catalog service: deep module for building the documentation catalog.

Owns the whole build: load the root ``mkdocs.yml``, walk every (included)
navigation tree, then resolve the optional symbol list. Callers get back an
in-memory result; persisting it is the repository's job.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Optional

from ..core.config import Settings, settings as default_settings
from ..exceptions import SymbolListError
from ..schemas.catalog import Catalog, CatalogEntry, SymbolAssociation
from .nav_loader import load_nav_config
from .nav_walker import NavWalker
from .symbol_matcher import SymbolMatcher, load_symbol_references

logger = logging.getLogger(__name__)

ROOT_CONFIG_NAME = "mkdocs.yml"


@dataclass
class BuildStats:
    documents: int = 0
    skipped_documents: int = 0
    ignored_references: int = 0
    skipped_inclusions: int = 0
    duplicate_paths: int = 0
    recovered_pages: int = 0
    symbols_parsed: int = 0
    symbols_matched: int = 0
    symbols_unmatched: int = 0


@dataclass
class CatalogBuildResult:
    entries: List[CatalogEntry]
    associations: List[SymbolAssociation] = field(default_factory=list)
    stats: BuildStats = field(default_factory=BuildStats)


class CatalogService:
    """Build a catalog from a documentation checkout."""

    def __init__(self, config: Optional[Settings] = None):
        self.settings = config or default_settings

    def build(self, tree_root: Path, symbol_urls: Optional[Path] = None) -> CatalogBuildResult:
        """Build the catalog for the checkout at *tree_root*.

        Raises:
            NavConfigError: the root ``mkdocs.yml`` is missing or malformed.
        """
        tree_root = tree_root.resolve()
        root_config = load_nav_config(tree_root / ROOT_CONFIG_NAME)

        catalog = Catalog()
        walker = NavWalker(
            tree_root,
            catalog,
            docs_dir=self.settings.docs_dir,
            extension=self.settings.doc_extension,
        )
        walker.walk_config(root_config)

        stats = BuildStats(**asdict(walker.stats))
        logger.info("Found %d documents", len(catalog), extra={"documents": len(catalog)})
        if walker.stats.skipped_documents or walker.stats.skipped_inclusions:
            logger.warning(
                "Skipped %d unreadable documents and %d sub-sites",
                walker.stats.skipped_documents, walker.stats.skipped_inclusions,
            )

        associations: List[SymbolAssociation] = []
        if symbol_urls is not None:
            associations = self._resolve_symbols(catalog, tree_root, symbol_urls, stats)

        return CatalogBuildResult(entries=catalog.entries(), associations=associations, stats=stats)

    def _resolve_symbols(
        self,
        catalog: Catalog,
        tree_root: Path,
        symbol_urls: Path,
        stats: BuildStats,
    ) -> List[SymbolAssociation]:
        try:
            references = load_symbol_references(symbol_urls)
        except SymbolListError as e:
            logger.warning("Symbol URLs skipped: %s", e.message, extra=e.to_dict()["details"])
            return []

        matcher = SymbolMatcher(
            catalog,
            tree_root,
            docs_dir=self.settings.docs_dir,
            extension=self.settings.doc_extension,
        )
        associations = matcher.resolve(references)

        stats.recovered_pages = matcher.stats.recovered
        stats.symbols_parsed = matcher.stats.parsed
        stats.symbols_matched = matcher.stats.matched
        stats.symbols_unmatched = matcher.stats.unmatched
        return associations
