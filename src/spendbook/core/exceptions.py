"""Custom exception classes for statement ingestion.

This module defines a hierarchy of exceptions used throughout the
ingestion pipeline. Each exception maps to a specific error code
defined in errors.py.
"""

from typing import Any

from spendbook.core.errors import get_error


class StatementProcessingError(Exception):
    """Base exception for all statement processing errors.

    All custom exceptions inherit from this base class and include
    an error_code that maps to the error catalog.

    Attributes:
        error_code: Code from the error catalog (e.g., "PARSE_001")
        details: Additional context about the error
    """

    def __init__(
        self,
        error_code: str,
        details: dict[str, Any] | None = None,
        message: str | None = None,
    ):
        """Initialize the exception.

        Args:
            error_code: Error code from errors.py
            details: Additional error context
            message: Specific message (defaults to the catalog message)
        """
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message or get_error(error_code)["message"])

    @property
    def user_message(self) -> str:
        return get_error(self.error_code)["user_message"]

    @property
    def suggestion(self) -> str:
        return get_error(self.error_code)["suggestion"]


class FormatNotRecognizedError(StatementProcessingError):
    """Raised when no registered parser accepts a file (PARSE_001).

    The details carry the filename and every supported bank.
    """

    def __init__(self, filename: str, supported_banks: list[str]):
        super().__init__(
            "PARSE_001",
            {"filename": filename, "supported_banks": supported_banks},
            f"Unable to detect bank type for file: {filename}. "
            f"Supported banks: {', '.join(supported_banks)}",
        )


class ParsingError(StatementProcessingError):
    """Raised when a recognized format cannot be parsed.

    Common causes:
    - No supported header vocabulary (PARSE_002)
    - Unreadable PDF content (PARSE_003)
    """

    pass


class SessionExpiredError(StatementProcessingError):
    """Raised when a two-phase import session is unknown or expired (IMPORT_001).

    The user can recover by uploading the files again.
    """

    def __init__(self, session_id: str):
        super().__init__(
            "IMPORT_001",
            {"session_id": session_id},
            "Import session not found or expired. Please upload the files again.",
        )


class UploadValidationError(StatementProcessingError):
    """Raised when uploaded files fail basic validation."""

    pass


class CategoryNotFoundError(StatementProcessingError):
    """Raised when a category reference does not exist (CAT_001)."""

    def __init__(self, category_id: Any):
        super().__init__("CAT_001", {"category_id": str(category_id)})


class DuplicateRuleError(StatementProcessingError):
    """Raised when a rule keyword already exists case-insensitively (RULE_001)."""

    def __init__(self, keyword: str, rule_id: Any):
        super().__init__("RULE_001", {"keyword": keyword, "rule_id": str(rule_id)})


class PersistenceError(StatementProcessingError):
    """Raised when the atomic import write fails (DB_001).

    Nothing from the failed call is committed.
    """

    pass


class ExchangeRateError(StatementProcessingError):
    """Raised when a conversion rate cannot be obtained.

    - Lookup failed with no cached fallback (FX_001)
    - Invalid currency code (FX_002)
    """

    pass
