"""Catalog schemas."""

from typing import Dict, Iterator, List, Optional

from pydantic import BaseModel, field_validator

# Separator between breadcrumb segments in a catalog path.
BREADCRUMB_SEPARATOR = " / "


class CatalogEntry(BaseModel):
    """One searchable document, keyed by its breadcrumb path."""
    path: str
    file: str
    title: str
    keywords: str = ""
    content: str
    excluded: bool = False  # Disambiguation page recovered outside the nav

    model_config = {"frozen": True}


class SymbolReference(BaseModel):
    """One record of the external symbol list."""
    symbol: str
    url: str

    @field_validator('url')
    @classmethod
    def normalize_url(cls, v: str) -> str:
        return v.strip().strip('/')


class SymbolAssociation(BaseModel):
    """Maps a symbol to the catalog path documenting it."""
    symbol: str
    path: str

    model_config = {"frozen": True}


class Catalog:
    """Ordered catalog with first-wins path uniqueness."""

    def __init__(self) -> None:
        self._entries: Dict[str, CatalogEntry] = {}
        self.duplicates = 0

    def add(self, entry: CatalogEntry) -> bool:
        """Add *entry* unless its path is taken. Returns True when kept."""
        if entry.path in self._entries:
            self.duplicates += 1
            return False
        self._entries[entry.path] = entry
        return True

    def get(self, path: str) -> Optional[CatalogEntry]:
        return self._entries.get(path)

    def entries(self) -> List[CatalogEntry]:
        return list(self._entries.values())

    def __contains__(self, path: str) -> bool:
        return path in self._entries

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)
