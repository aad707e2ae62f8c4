"""Symbol link model."""

from sqlalchemy import Column, Text
from ..database import Base


class SymbolLink(Base):
    """Maps a language symbol to the docs.path documenting it."""

    __tablename__ = "help_urls"

    symbol = Column(Text, primary_key=True)
    path = Column(Text, nullable=False)
