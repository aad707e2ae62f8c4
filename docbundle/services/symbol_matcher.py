"""Resolve symbol help URLs against the catalog.

Help URLs point at published pages (``language-reference-guide/symbols/iota``).
Most of them correspond to a catalog entry through its normalized file path.
The rest are usually disambiguation pages that exist on disk but appear in no
navigation tree; the recovery pass adds those to the catalog as excluded
entries so the matching pass can resolve them like any other page.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import TypeAdapter, ValidationError

from ..exceptions import SymbolListError
from ..schemas.catalog import (
    BREADCRUMB_SEPARATOR,
    Catalog,
    CatalogEntry,
    SymbolAssociation,
    SymbolReference,
)
from .content_normalizer import normalize_document
from .path_normalizer import DEFAULT_DOCS_DIR, DEFAULT_EXTENSION, INDEX_PAGE, normalize_file_path

logger = logging.getLogger(__name__)

_REFERENCE_LIST = TypeAdapter(List[SymbolReference])


def load_symbol_references(list_path: Path) -> List[SymbolReference]:
    """Parse a JSON ``[{"symbol": ..., "url": ...}]`` file.

    Raises:
        SymbolListError: file unreadable, not JSON, or records malformed.
    """
    try:
        data = json.loads(list_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise SymbolListError(str(list_path), str(e)) from e
    except json.JSONDecodeError as e:
        raise SymbolListError(str(list_path), f"invalid JSON: {e}") from e

    try:
        return _REFERENCE_LIST.validate_python(data)
    except ValidationError as e:
        raise SymbolListError(str(list_path), f"{e.error_count()} malformed record(s)") from e


def build_nav_path(url: str) -> str:
    """Readable breadcrumb from a URL path.

    ``language-reference-guide/symbols/iota`` -> ``Language Reference Guide / Symbols / Iota``
    """
    segments = []
    for segment in url.split("/"):
        words = [w[:1].upper() + w[1:] for w in segment.split("-")]
        segments.append(" ".join(words))
    return BREADCRUMB_SEPARATOR.join(segments)


@dataclass
class MatchStats:
    parsed: int = 0
    recovered: int = 0
    matched: int = 0
    unmatched: int = 0
    duplicate_symbols: int = 0


class SymbolMatcher:
    """Index the catalog by normalized file path and match help URLs against it."""

    def __init__(
        self,
        catalog: Catalog,
        tree_root: Path,
        docs_dir: str = DEFAULT_DOCS_DIR,
        extension: str = DEFAULT_EXTENSION,
    ) -> None:
        self.catalog = catalog
        self.tree_root = tree_root
        self.docs_dir = docs_dir
        self.extension = extension
        self.stats = MatchStats()
        # normalized file path -> catalog path
        self.index: Dict[str, str] = {}
        # Sorted index keys for the suffix tier; reset whenever the index grows
        self._sorted_keys: Optional[List[str]] = None
        for entry in catalog:
            self._index_entry(entry)

    def _index_entry(self, entry: CatalogEntry) -> None:
        key = normalize_file_path(entry.file, self.docs_dir, self.extension)
        if key not in self.index:
            self.index[key] = entry.path
            self._sorted_keys = None

    def match(self, url: str) -> Optional[str]:
        """Return the catalog path for *url*, or None.

        Tries an exact match, then ``url/index``, then the lexicographically
        first indexed path ending in ``/url``.
        """
        if url in self.index:
            return self.index[url]

        section = f"{url}/{INDEX_PAGE}"
        if section in self.index:
            return self.index[section]

        if self._sorted_keys is None:
            self._sorted_keys = sorted(self.index)
        suffix = f"/{url}"
        for key in self._sorted_keys:
            if key == url or key.endswith(suffix):
                return self.index[key]
        return None

    def recover(self, references: List[SymbolReference]) -> int:
        """Add on-disk pages for URLs no catalog entry matches. Returns the count added."""
        added = 0
        for ref in references:
            if self.match(ref.url) is not None:
                continue
            entry = self._find_help_file(ref.url)
            if entry is None:
                continue
            if not self.catalog.add(entry):
                logger.debug("Recovered page %s collides with existing path %r", entry.file, entry.path)
                continue
            self._index_entry(entry)
            added += 1

        self.stats.recovered += added
        if added:
            logger.info("Added %d disambiguation pages from the symbol list", added, extra={"recovered": added})
        return added

    def associate(self, references: List[SymbolReference]) -> List[SymbolAssociation]:
        """Match every reference; first match per symbol wins."""
        associations: List[SymbolAssociation] = []
        seen = set()
        for ref in references:
            path = self.match(ref.url)
            if path is None:
                logger.debug("No document for symbol %r (%s)", ref.symbol, ref.url)
                self.stats.unmatched += 1
                continue
            if ref.symbol in seen:
                self.stats.duplicate_symbols += 1
                continue
            seen.add(ref.symbol)
            associations.append(SymbolAssociation(symbol=ref.symbol, path=path))
            self.stats.matched += 1
        return associations

    def resolve(self, references: List[SymbolReference]) -> List[SymbolAssociation]:
        """Recovery pass followed by the matching pass."""
        self.stats.parsed += len(references)
        self.recover(references)
        associations = self.associate(references)
        logger.info(
            "Symbol URLs: %d parsed, %d matched to docs",
            len(references), self.stats.matched,
            extra={"parsed": len(references), "matched": self.stats.matched, "unmatched": self.stats.unmatched},
        )
        return associations

    def _find_help_file(self, url: str) -> Optional[CatalogEntry]:
        """Look for ``<subsite>/docs/<rest>.md`` or ``<subsite>/docs/<rest>/index.md``."""
        subsite, sep, rest = url.partition("/")
        if not sep or not subsite or not rest:
            return None

        root = Path(os.path.abspath(self.tree_root))
        base = root / subsite / self.docs_dir
        candidates = [
            base / f"{rest}{self.extension}",
            base / rest / f"{INDEX_PAGE}{self.extension}",
        ]
        for candidate in candidates:
            candidate = Path(os.path.normpath(candidate))
            if root not in candidate.parents:
                logger.warning("Ignoring symbol URL %r: resolves outside the tree", url)
                return None
            try:
                raw = candidate.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                continue
            doc = normalize_document(raw)
            title = doc.title or url.split("/")[-1]
            return CatalogEntry(
                path=build_nav_path(url),
                file=candidate.relative_to(root).as_posix(),
                title=title,
                keywords=doc.keywords,
                content=doc.content,
                excluded=True,
            )
        return None
