"""Catalog document model."""

from sqlalchemy import Boolean, Column, Text
from ..database import Base


class CatalogDocument(Base):
    """Main docs table; mirrored into docs_fts for full-text search."""

    __tablename__ = "docs"

    # Nav breadcrumb: "Language Reference Guide / Symbols / Iota"
    path = Column(Text, primary_key=True)
    file = Column(Text, nullable=False)  # Relative to the repository root
    title = Column(Text, nullable=False)
    keywords = Column(Text, nullable=False, default='', server_default='')
    content = Column(Text, nullable=False)

    # Disambiguation pages recovered outside the nav
    exclude = Column(Boolean, nullable=False, default=False, server_default='0')
