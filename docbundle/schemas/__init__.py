"""Pydantic schemas and navigation types."""

from .catalog import (
    BREADCRUMB_SEPARATOR,
    Catalog,
    CatalogEntry,
    SymbolAssociation,
    SymbolReference,
)
from .navigation import (
    INCLUDE_PREFIX,
    IncludeDirective,
    NavConfig,
    NavInclusion,
    NavLeaf,
    NavNode,
    NavSection,
    RawNavConfig,
    parse_nav,
)

__all__ = [
    "BREADCRUMB_SEPARATOR", "Catalog", "CatalogEntry",
    "SymbolAssociation", "SymbolReference",
    "INCLUDE_PREFIX", "IncludeDirective", "NavConfig", "NavInclusion",
    "NavLeaf", "NavNode", "NavSection", "RawNavConfig", "parse_nav",
]
