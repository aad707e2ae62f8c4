"""Database models."""

from .catalog_document import CatalogDocument
from .symbol_link import SymbolLink

__all__ = ["CatalogDocument", "SymbolLink"]
