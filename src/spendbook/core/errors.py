"""Error codes and user-friendly messages.

This module defines the error catalog for statement ingestion.
Each error has:
- code: Unique identifier
- message: Technical description (for logs)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the user
- retry_allowed: Whether the error is retryable
"""

ERROR_CATALOG: dict[str, dict] = {
    "PARSE_001": {
        "code": "PARSE_001",
        "message": "Unsupported statement format detected",
        "user_message": "We couldn't recognize this statement format.",
        "suggestion": "Please upload a statement exported by one of the supported banks.",
        "retry_allowed": False,
    },
    "PARSE_002": {
        "code": "PARSE_002",
        "message": "Statement format recognized but the header row is not supported",
        "user_message": "This file looks like a known export but its columns are not what we expected.",
        "suggestion": "Export the statement again with one of the supported column layouts.",
        "retry_allowed": False,
    },
    "PARSE_003": {
        "code": "PARSE_003",
        "message": "PDF text extraction failed: corrupted or invalid file",
        "user_message": "This PDF appears to be corrupted or damaged.",
        "suggestion": "Try downloading the statement again from your bank's website.",
        "retry_allowed": True,
    },
    "IMPORT_001": {
        "code": "IMPORT_001",
        "message": "Import session not found or expired",
        "user_message": "Your import session has expired.",
        "suggestion": "Please upload the files again.",
        "retry_allowed": True,
    },
    "IMPORT_002": {
        "code": "IMPORT_002",
        "message": "No files supplied for import",
        "user_message": "No files were uploaded.",
        "suggestion": "Please select at least one statement file.",
        "retry_allowed": False,
    },
    "UPLOAD_001": {
        "code": "UPLOAD_001",
        "message": "Uploaded file is empty",
        "user_message": "One of the uploaded files is empty.",
        "suggestion": "Check the file and upload it again.",
        "retry_allowed": False,
    },
    "UPLOAD_002": {
        "code": "UPLOAD_002",
        "message": "Uploaded file appears corrupted or in an unsupported format",
        "user_message": "One of the uploaded files appears to be corrupted.",
        "suggestion": "Supported formats are CSV, TXT, XLSX, XLS and PDF.",
        "retry_allowed": False,
    },
    "UPLOAD_003": {
        "code": "UPLOAD_003",
        "message": "File size exceeds maximum limit",
        "user_message": "One of the uploaded files is too large.",
        "suggestion": "Please upload a smaller statement file.",
        "retry_allowed": False,
    },
    "UPLOAD_004": {
        "code": "UPLOAD_004",
        "message": "Too many files in one upload",
        "user_message": "Too many files were uploaded at once.",
        "suggestion": "Split the upload into smaller batches.",
        "retry_allowed": False,
    },
    "CAT_001": {
        "code": "CAT_001",
        "message": "Category not found",
        "user_message": "That category doesn't exist.",
        "suggestion": "Please choose an existing category.",
        "retry_allowed": False,
    },
    "RULE_001": {
        "code": "RULE_001",
        "message": "A rule with this keyword already exists",
        "user_message": "There is already a rule for this keyword.",
        "suggestion": "Edit the existing rule instead of creating a new one.",
        "retry_allowed": False,
    },
    "DB_001": {
        "code": "DB_001",
        "message": "Database transaction failed during import",
        "user_message": "We couldn't save your transactions due to a database error.",
        "suggestion": "Nothing was imported. Please try again in a few moments.",
        "retry_allowed": True,
    },
    "FX_001": {
        "code": "FX_001",
        "message": "Exchange rate lookup failed",
        "user_message": "We couldn't fetch the current exchange rate.",
        "suggestion": "Enter the conversion rate manually or try again later.",
        "retry_allowed": True,
    },
    "FX_002": {
        "code": "FX_002",
        "message": "Invalid currency code",
        "user_message": "Currency codes must be 3-letter ISO codes.",
        "suggestion": "Use codes such as EUR, USD or CZK.",
        "retry_allowed": False,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Unknown codes resolve to a generic definition instead of raising.
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def get_user_message(error_code: str) -> str:
    """Get user-friendly message for an error code."""
    return get_error(error_code)["user_message"]


def get_suggestion(error_code: str) -> str:
    """Get actionable suggestion for an error code."""
    return get_error(error_code)["suggestion"]


def is_retryable(error_code: str) -> bool:
    """Check if an error is retryable."""
    return get_error(error_code)["retry_allowed"]
