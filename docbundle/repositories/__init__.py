"""Repository layer for database operations."""

from .base import BaseRepository, SearchHit
from .catalog_repository import CatalogRepository, escape_fts_query

__all__ = [
    "BaseRepository",
    "SearchHit",
    "CatalogRepository",
    "escape_fts_query",
]
