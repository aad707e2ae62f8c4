"""Persist a built catalog into a fresh SQLite database."""

import logging
from pathlib import Path

from ..database import create_catalog_engine, init_catalog_schema, session_factory
from ..repositories import CatalogRepository
from .catalog_service import CatalogBuildResult

logger = logging.getLogger(__name__)


def write_catalog(result: CatalogBuildResult, database_path: Path) -> None:
    """Write *result* to *database_path*, replacing any existing file."""
    database_path.unlink(missing_ok=True)
    database_path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_catalog_engine(database_path)
    try:
        init_catalog_schema(engine)
        SessionLocal = session_factory(engine)
        db = SessionLocal()
        try:
            repo = CatalogRepository(db)
            documents = repo.add_entries(result.entries)
            links = repo.add_associations(result.associations)
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
    finally:
        engine.dispose()

    logger.info(
        "Wrote %s (%d documents, %d symbol links)", database_path, documents, links,
        extra={"database": str(database_path), "rows": documents, "links": links},
    )
