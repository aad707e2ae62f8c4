"""Database configuration and session management.

The catalog is a standalone SQLite file. Engines are created per file
instead of once at import time, since ``build`` writes a fresh database
and ``search`` opens an existing one.
"""

from pathlib import Path
from typing import Union

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker

# Create base class for models
Base = declarative_base()

# External-content FTS5 index over the docs table, filled by an insert trigger.
_FTS_DDL = [
    """
    CREATE VIRTUAL TABLE IF NOT EXISTS docs_fts USING fts5(
        path,
        title,
        keywords,
        content,
        content='docs',
        content_rowid='rowid'
    )
    """,
    """
    CREATE TRIGGER IF NOT EXISTS docs_ai AFTER INSERT ON docs BEGIN
        INSERT INTO docs_fts(rowid, path, title, keywords, content)
        VALUES (NEW.rowid, NEW.path, NEW.title, NEW.keywords, NEW.content);
    END
    """,
]


def database_url(database_path: Union[str, Path]) -> str:
    return f"sqlite:///{Path(database_path)}"


def create_catalog_engine(database_path: Union[str, Path]) -> Engine:
    """Create an engine bound to a catalog file."""
    return create_engine(database_url(database_path))


def init_catalog_schema(engine: Engine) -> None:
    """Create the catalog tables and the full-text index."""
    # Import models so they register on Base.metadata
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    with engine.connect() as conn:
        for statement in _FTS_DDL:
            conn.execute(text(statement))
        conn.commit()


def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
