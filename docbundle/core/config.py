"""Application configuration with validation."""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import Optional


class Settings(BaseSettings):
    """
    docbundle settings with validation.

    Every field can be set through a ``DOCBUNDLE_``-prefixed environment
    variable or a ``.env`` file; CLI flags override individual values.
    """

    # Source acquisition
    repo_url: str = Field(
        default="git@github.com:Dyalog/documentation.git",
        description="Documentation repository cloned when no local root is given"
    )
    repo_branch: str = Field(
        default="main",
        description="Branch checked out by the shallow clone"
    )

    # Output
    database_path: str = Field(
        default="dyalog-docs.db",
        description="SQLite file the catalog is written to and searched from"
    )

    # Symbol matching
    # Empty string = symbol stage disabled.
    symbol_urls_path: str = Field(
        default="symbol-urls.json",
        description="JSON list of {symbol, url} records"
    )

    # Navigation layout
    docs_dir: str = Field(
        default="docs",
        description="Document root name used when a mkdocs.yml omits docs_dir"
    )
    doc_extension: str = Field(
        default=".md",
        description="Extension a navigation leaf needs to be treated as a document"
    )

    # Lookup
    search_limit: int = Field(
        default=50,
        description="Maximum number of hits printed by `docbundle search`"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: str = Field(
        default="text",
        description="Logging output format: 'json' for structured, 'text' for human-readable"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard Python logging levels."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v_upper

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in ('json', 'text'):
            raise ValueError("Invalid log format. Must be 'json' or 'text'")
        return v_lower

    @field_validator('doc_extension')
    @classmethod
    def validate_doc_extension(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("doc_extension cannot be empty")
        return v if v.startswith('.') else f".{v}"

    def symbol_urls(self) -> Optional[str]:
        """Symbol list path, or None when the stage is disabled."""
        return self.symbol_urls_path.strip() or None

    class Config:
        """Pydantic configuration."""
        env_prefix = "DOCBUNDLE_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Global settings instance
settings = Settings()
