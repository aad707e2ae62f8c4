"""Base repository with the shared session handling.

Subclasses receive an open Session and never commit; the caller owns the
transaction boundary.
"""

from dataclasses import dataclass

from sqlalchemy.orm import Session


@dataclass(frozen=True)
class SearchHit:
    """A catalog row as returned by lookups: rowid, title and nav path."""
    rowid: int
    title: str
    path: str


class BaseRepository:
    """Shared repository logic for SQLAlchemy sessions."""

    def __init__(self, db: Session):
        self.db = db
