"""Three-tier lookup over a catalog database.

Tiers, in priority order:
1. keyword substring match (the hidden search terms authors put in pages),
2. full-text match on titles,
3. full-text match on page content.

A document appears once, at the first tier that finds it.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from sqlalchemy.orm import Session

from ..database import create_catalog_engine, session_factory
from ..exceptions import CatalogNotFoundError
from ..repositories import CatalogRepository, SearchHit

logger = logging.getLogger(__name__)


@contextmanager
def open_catalog(database_path: Path) -> Iterator[Session]:
    """Session on an existing catalog file."""
    if not database_path.is_file():
        raise CatalogNotFoundError(str(database_path))
    engine = create_catalog_engine(database_path)
    db = session_factory(engine)()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


class SearchService:
    """Lookups against an open catalog session."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CatalogRepository(db)

    def search(self, query: str, limit: int = 50) -> List[SearchHit]:
        query = query.strip()
        if not query or limit <= 0:
            return []

        hits: List[SearchHit] = []
        seen: set[int] = set()

        def remaining() -> int:
            return limit - len(hits)

        for tier_hits in (
            lambda: self.repo.search_keywords(query, remaining(), seen),
            lambda: self.repo.search_fts("title", query, remaining(), seen),
            lambda: self.repo.search_fts("content", query, remaining(), seen),
        ):
            if remaining() <= 0:
                break
            for hit in tier_hits():
                seen.add(hit.rowid)
                hits.append(hit)

        logger.debug("Search %r: %d hit(s)", query, len(hits))
        return hits

    def fetch(self, rowid: int) -> str:
        """Content of the document with *rowid*. Raises DocumentNotFoundError."""
        return self.repo.get_content(rowid)

    def lookup_symbol(self, symbol: str) -> Optional[SearchHit]:
        return self.repo.get_symbol(symbol)
