"""Tests for upload validation."""

import pytest

from spendbook.core.exceptions import UploadValidationError
from spendbook.schemas.internal import UploadedFile
from spendbook.services.uploads import validate_files

LIMIT = 1024
GARBAGE = bytes(range(0, 9)) * 12


def check(*files: UploadedFile, max_files: int = 10) -> None:
    validate_files(list(files), max_size_bytes=LIMIT, max_files=max_files)


class TestValidateFiles:
    """Test suite for validate_files."""

    def test_valid_files_pass(self):
        check(
            UploadedFile("a.csv", b"Type,Amount\nCard Payment,-1.00\n"),
            UploadedFile("b.pdf", GARBAGE),
        )

    def test_no_files(self):
        with pytest.raises(UploadValidationError) as exc_info:
            check()
        assert exc_info.value.error_code == "IMPORT_002"

    def test_empty_file(self):
        with pytest.raises(UploadValidationError) as exc_info:
            check(UploadedFile("empty.csv", b""))

        assert exc_info.value.error_code == "UPLOAD_001"
        assert exc_info.value.details["files"] == {"empty.csv": "File is empty"}

    def test_tiny_file_is_corrupted(self):
        with pytest.raises(UploadValidationError) as exc_info:
            check(UploadedFile("tiny.csv", b"abc"))
        assert exc_info.value.error_code == "UPLOAD_002"

    def test_binary_garbage_in_text_file(self):
        with pytest.raises(UploadValidationError) as exc_info:
            check(UploadedFile("garbage.csv", GARBAGE))
        assert exc_info.value.error_code == "UPLOAD_002"

    def test_oversize_file(self):
        with pytest.raises(UploadValidationError) as exc_info:
            check(UploadedFile("big.csv", b"a" * (LIMIT + 1)))
        assert exc_info.value.error_code == "UPLOAD_003"

    def test_too_many_files(self):
        files = [UploadedFile(f"{i}.csv", b"Type,Amount\n1,2\n") for i in range(3)]
        with pytest.raises(UploadValidationError) as exc_info:
            check(*files, max_files=2)
        assert exc_info.value.error_code == "UPLOAD_004"

    def test_errors_collected_per_file(self):
        with pytest.raises(UploadValidationError) as exc_info:
            check(
                UploadedFile("empty.csv", b""),
                UploadedFile("ok.csv", b"Type,Amount\n1,2\n"),
                UploadedFile("garbage.txt", GARBAGE),
            )

        files = exc_info.value.details["files"]
        assert set(files) == {"empty.csv", "garbage.txt"}
        assert str(exc_info.value).startswith("2 files have errors")
