"""Sanity checks on uploaded files before any parsing happens."""

import re
from collections.abc import Sequence

from spendbook.core.exceptions import UploadValidationError
from spendbook.schemas.internal import UploadedFile

MIN_FILE_SIZE = 10
SNIFF_BYTES = 100
MIN_PRINTABLE_RATIO = 0.7
BINARY_EXTENSIONS = (".pdf", ".xlsx", ".xls")

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0E-\x1F]")


def _looks_corrupted(upload: UploadedFile) -> bool:
    """Too many control characters at the head of a text file."""
    if upload.filename.lower().endswith(BINARY_EXTENSIONS):
        return False

    head = upload.content[:SNIFF_BYTES].decode("utf-8", errors="replace")
    non_printable = len(_CONTROL_CHARS.findall(head))
    printable_ratio = 1 - non_printable / min(SNIFF_BYTES, len(upload.content))
    return printable_ratio < MIN_PRINTABLE_RATIO


def _check_file(upload: UploadedFile, max_size_bytes: int) -> tuple[str, str] | None:
    """Return (error code, reason) for a bad file, or None."""
    size = len(upload.content)
    if size == 0:
        return "UPLOAD_001", "File is empty"
    if size < MIN_FILE_SIZE:
        return "UPLOAD_002", "File appears to be corrupted or invalid"
    if size > max_size_bytes:
        return "UPLOAD_003", f"File exceeds the {max_size_bytes} byte limit"
    if _looks_corrupted(upload):
        return "UPLOAD_002", "File appears to be corrupted or in an unsupported format"
    return None


def validate_files(
    files: Sequence[UploadedFile],
    max_size_bytes: int,
    max_files: int,
) -> None:
    """Reject empty, truncated, binary-garbage, oversize or too many files.

    Problems are collected for every file and raised together.

    Raises:
        UploadValidationError: With ``details["files"]`` mapping filename to reason
    """
    if not files:
        raise UploadValidationError("IMPORT_002")

    if len(files) > max_files:
        raise UploadValidationError(
            "UPLOAD_004",
            {"max_files": max_files, "received": len(files)},
            f"Too many files: {len(files)} (maximum {max_files})",
        )

    errors: dict[str, str] = {}
    codes: dict[str, str] = {}

    for upload in files:
        problem = _check_file(upload, max_size_bytes)
        if problem is not None:
            codes[upload.filename], errors[upload.filename] = problem

    if not errors:
        return

    first_name, first_error = next(iter(errors.items()))
    if len(errors) == 1:
        message = f"{first_name}: {first_error}"
    else:
        message = f"{len(errors)} files have errors. First error: {first_error}"

    raise UploadValidationError(codes[first_name], {"files": errors}, message)
