"""Flatten a multi-site MkDocs nav into catalog entries.

Breadcrumbs are tuples: extending one for a child builds a new tuple, so
sibling branches never see each other's segments.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Tuple

from ..exceptions import NavConfigError
from ..schemas.catalog import BREADCRUMB_SEPARATOR, Catalog, CatalogEntry
from ..schemas.navigation import NavConfig, NavInclusion, NavLeaf, NavNode, NavSection
from .content_normalizer import normalize_document
from .nav_loader import load_nav_config
from .path_normalizer import DEFAULT_DOCS_DIR, DEFAULT_EXTENSION

logger = logging.getLogger(__name__)

Breadcrumb = Tuple[str, ...]


@dataclass
class WalkStats:
    """Counters for everything the walk kept, skipped or ignored."""
    documents: int = 0
    skipped_documents: int = 0
    ignored_references: int = 0
    skipped_inclusions: int = 0
    duplicate_paths: int = 0


class NavWalker:
    """Depth-first walk over a nav tree, appending entries to a shared catalog.

    Args:
        tree_root: Root of the documentation checkout. Included configs are
            resolved against it and entry ``file`` values are relative to it.
        catalog: Accumulator; first entry per path wins.
        loader: Reads a nested ``mkdocs.yml``. Must raise NavConfigError.
    """

    def __init__(
        self,
        tree_root: Path,
        catalog: Catalog,
        loader: Callable[[Path], NavConfig] = load_nav_config,
        docs_dir: str = DEFAULT_DOCS_DIR,
        extension: str = DEFAULT_EXTENSION,
    ) -> None:
        self.tree_root = tree_root
        self.catalog = catalog
        self.loader = loader
        self.docs_dir = docs_dir
        self.extension = extension
        self.stats = WalkStats()
        # Resolved configs on the current inclusion chain
        self._include_chain: Tuple[Path, ...] = ()

    def walk_config(self, config: NavConfig, breadcrumb: Breadcrumb = ()) -> None:
        """Walk a loaded site config from its own document root."""
        self._include_chain = self._include_chain + (config.config_path.resolve(),)
        try:
            self.walk(config.nav, config.docs_root(self.docs_dir), breadcrumb)
        finally:
            self._include_chain = self._include_chain[:-1]

    def walk(self, nodes: Iterable[NavNode], docs_root: Path, breadcrumb: Breadcrumb = ()) -> None:
        for node in nodes:
            if isinstance(node, NavLeaf):
                self._add_document(node.reference, docs_root, breadcrumb)
            elif isinstance(node, NavSection):
                self.walk(node.children, docs_root, breadcrumb + (node.title,))
            elif isinstance(node, NavInclusion):
                self._include(node.reference, breadcrumb)

    def _include(self, reference: str, breadcrumb: Breadcrumb) -> None:
        config_path = self.tree_root / reference
        if config_path.resolve() in self._include_chain:
            logger.warning("Skipping include %s: cyclic inclusion", reference)
            self.stats.skipped_inclusions += 1
            return

        try:
            config = self.loader(config_path)
        except NavConfigError as e:
            logger.warning("Skipping include %s: %s", reference, e.details.get("reason", e.message))
            self.stats.skipped_inclusions += 1
            return

        # The sub-site's site_name usually repeats the including title; it is not a segment.
        self.walk_config(config, breadcrumb)

    def _add_document(self, reference: str, docs_root: Path, breadcrumb: Breadcrumb) -> None:
        if not reference.endswith(self.extension):
            self.stats.ignored_references += 1
            return

        abs_path = Path(os.path.normpath(docs_root / reference))
        try:
            raw = abs_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping %s: %s", reference, e)
            self.stats.skipped_documents += 1
            return

        doc = normalize_document(raw)
        path = BREADCRUMB_SEPARATOR.join(breadcrumb) or reference
        title = doc.title
        if not title and breadcrumb:
            title = breadcrumb[-1]

        entry = CatalogEntry(
            path=path,
            file=self._relative_file(abs_path),
            title=title,
            keywords=doc.keywords,
            content=doc.content,
        )
        if self.catalog.add(entry):
            self.stats.documents += 1
        else:
            logger.debug("Duplicate path %r from %s dropped", path, entry.file)
            self.stats.duplicate_paths += 1

    def _relative_file(self, abs_path: Path) -> str:
        try:
            return abs_path.relative_to(self.tree_root).as_posix()
        except ValueError:
            # docs_dir pointing outside the tree
            return abs_path.as_posix()
