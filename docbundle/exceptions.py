"""Custom exception hierarchy for docbundle."""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(str, Enum):
    """Standardized error codes for diagnostics and CLI output."""

    # Navigation errors
    NAV_CONFIG_INVALID = "NAV_CONFIG_INVALID"

    # Symbol list errors
    SYMBOL_LIST_INVALID = "SYMBOL_LIST_INVALID"

    # Source acquisition errors
    SOURCE_FETCH_FAILED = "SOURCE_FETCH_FAILED"

    # Catalog errors
    CATALOG_NOT_FOUND = "CATALOG_NOT_FOUND"
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class DocBundleError(Exception):
    """
    Base exception for all docbundle errors.

    Provides structured error reports with:
    - Human-readable message
    - Machine-readable error code
    - Process exit code used by the CLI
    - Optional additional details
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        exit_code: int = 1,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.exit_code = exit_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for structured logging.

        Returns:
            Dictionary with error, message, and details fields
        """
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class NavConfigError(DocBundleError):
    """Navigation config could not be read or parsed.

    Fatal for the top-level site, recoverable for included sub-sites.
    """

    def __init__(self, config_path: str, reason: str):
        super().__init__(
            f"Invalid navigation config {config_path}: {reason}",
            ErrorCode.NAV_CONFIG_INVALID,
            exit_code=2,
            details={"config_path": config_path, "reason": reason}
        )


class SymbolListError(DocBundleError):
    """Symbol URL list is missing or malformed."""

    def __init__(self, list_path: str, reason: str):
        super().__init__(
            f"Cannot use symbol list {list_path}: {reason}",
            ErrorCode.SYMBOL_LIST_INVALID,
            details={"list_path": list_path, "reason": reason}
        )


class SourceFetchError(DocBundleError):
    """Cloning the documentation repository failed."""

    def __init__(self, repo_url: str, reason: str):
        super().__init__(
            f"Failed to fetch {repo_url}: {reason}",
            ErrorCode.SOURCE_FETCH_FAILED,
            exit_code=3,
            details={"repo_url": repo_url}
        )


class CatalogNotFoundError(DocBundleError):
    """Catalog database does not exist."""

    def __init__(self, database_path: str):
        super().__init__(
            f"Catalog database not found: {database_path}",
            ErrorCode.CATALOG_NOT_FOUND,
            details={"database_path": database_path}
        )


class DocumentNotFoundError(DocBundleError):
    """No catalog row for the requested rowid."""

    def __init__(self, rowid: int):
        super().__init__(
            f"No document with rowid {rowid}",
            ErrorCode.DOCUMENT_NOT_FOUND,
            details={"rowid": rowid}
        )
