"""Catalog repository for database operations.

Owns every query against the docs, docs_fts and help_urls tables. Inserts
use INSERT OR IGNORE so the first row for a path or symbol wins, matching
the in-memory catalog.
"""

import logging
from typing import Iterable, List, Optional, Set

import sqlalchemy.exc
from sqlalchemy import text
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from ..exceptions import DocumentNotFoundError
from ..models import CatalogDocument, SymbolLink
from ..schemas.catalog import CatalogEntry, SymbolAssociation
from .base import BaseRepository, SearchHit

FTS_COLUMNS = ("path", "title", "keywords", "content")

logger = logging.getLogger(__name__)


def escape_fts_query(query: str) -> str:
    """Quote *query* as a single FTS5 phrase, doubling embedded quotes."""
    return '"' + query.replace('"', '""') + '"'


class CatalogRepository(BaseRepository):
    """Repository for catalog documents and symbol links."""

    def add_entries(self, entries: Iterable[CatalogEntry]) -> int:
        """Insert entries, ignoring duplicate paths. Returns rows inserted."""
        inserted = 0
        for entry in entries:
            stmt = sqlite_insert(CatalogDocument).values(
                path=entry.path,
                file=entry.file,
                title=entry.title,
                keywords=entry.keywords,
                content=entry.content,
                exclude=entry.excluded,
            ).on_conflict_do_nothing(index_elements=["path"])
            inserted += self.db.execute(stmt).rowcount
        self.db.flush()
        return inserted

    def add_associations(self, associations: Iterable[SymbolAssociation]) -> int:
        """Insert symbol links, ignoring duplicate symbols. Returns rows inserted."""
        inserted = 0
        for assoc in associations:
            stmt = sqlite_insert(SymbolLink).values(
                symbol=assoc.symbol,
                path=assoc.path,
            ).on_conflict_do_nothing(index_elements=["symbol"])
            inserted += self.db.execute(stmt).rowcount
        self.db.flush()
        return inserted

    def count(self, include_excluded: bool = True) -> int:
        query = self.db.query(CatalogDocument)
        if not include_excluded:
            query = query.filter(CatalogDocument.exclude.is_(False))
        return query.count()

    def list_paths(self, include_excluded: bool = False) -> List[str]:
        """Catalog paths in insertion order; disambiguation pages hidden by default."""
        query = self.db.query(CatalogDocument.path)
        if not include_excluded:
            query = query.filter(CatalogDocument.exclude.is_(False))
        return [row.path for row in query.order_by(text("rowid")).all()]

    def get_content(self, rowid: int) -> str:
        row = self.db.execute(
            text("SELECT content FROM docs WHERE rowid = :rowid"),
            {"rowid": rowid},
        ).first()
        if row is None:
            raise DocumentNotFoundError(rowid)
        return row.content

    def get_symbol(self, symbol: str) -> Optional[SearchHit]:
        """Document linked to *symbol*, or None."""
        row = self.db.execute(
            text(
                "SELECT d.rowid AS rowid, d.title AS title, d.path AS path "
                "FROM help_urls h JOIN docs d ON d.path = h.path "
                "WHERE h.symbol = :symbol"
            ),
            {"symbol": symbol},
        ).first()
        if row is None:
            return None
        return SearchHit(rowid=row.rowid, title=row.title, path=row.path)

    # ------------------------------------------------------------------
    # Search tiers
    # ------------------------------------------------------------------

    def search_keywords(self, query: str, limit: int, exclude_rowids: Set[int]) -> List[SearchHit]:
        """Case-insensitive substring match on the hidden keywords."""
        sql = text(
            "SELECT rowid AS rowid, title AS title, path AS path FROM docs "
            "WHERE keywords LIKE :pattern ESCAPE '\\' "
            "ORDER BY rowid"
        )
        return self._collect(sql, {"pattern": f"%{_escape_like(query)}%"}, limit, exclude_rowids)

    def search_fts(self, column: str, query: str, limit: int, exclude_rowids: Set[int]) -> List[SearchHit]:
        """FTS5 phrase match restricted to one indexed column."""
        if column not in FTS_COLUMNS:
            raise ValueError(f"Not an indexed column: {column}")
        # The tokenizer only indexes letters and digits
        if not any(ch.isalnum() for ch in query):
            return []
        sql = text(
            "SELECT rowid AS rowid, title AS title, path AS path FROM docs_fts "
            "WHERE docs_fts MATCH :query ORDER BY rank"
        )
        match = f"{column} : {escape_fts_query(query)}"
        try:
            return self._collect(sql, {"query": match}, limit, exclude_rowids)
        except sqlalchemy.exc.OperationalError as e:
            # Queries that tokenize to nothing are rejected by FTS5; treat as no hits.
            logger.debug("FTS query %r on %s failed: %s", query, column, e)
            self.db.rollback()
            return []

    def _collect(self, sql, params: dict, limit: int, exclude_rowids: Set[int]) -> List[SearchHit]:
        hits: List[SearchHit] = []
        for row in self.db.execute(sql, params):
            if len(hits) >= limit:
                break
            if row.rowid in exclude_rowids:
                continue
            hits.append(SearchHit(rowid=row.rowid, title=row.title, path=row.path))
        return hits


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
