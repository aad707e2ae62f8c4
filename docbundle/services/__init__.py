"""Service layer: catalog building, symbol matching, persistence and lookup."""

from .catalog_service import BuildStats, CatalogBuildResult, CatalogService

__all__ = ["BuildStats", "CatalogBuildResult", "CatalogService"]
