"""Tests for text linearization."""

import pytest

from spendbook.core.exceptions import ParsingError
from spendbook.parsers.extractor import PDFTextExtractor, decode_text, is_pdf


class TestPDFTextExtractor:
    """Test suite for PDFTextExtractor."""

    def test_plain_text_passes_through(self):
        extractor = PDFTextExtractor()
        assert extractor.extract_text("řádek 1\nřádek 2".encode("utf-8")) == "řádek 1\nřádek 2"

    def test_extract_lines_strips_blank_lines(self):
        extractor = PDFTextExtractor()
        assert extractor.extract_lines(b"  a  \n\n b\n") == ["a", "b"]

    def test_empty_content_raises(self):
        with pytest.raises(ParsingError) as exc_info:
            PDFTextExtractor().extract_text(b"")
        assert exc_info.value.error_code == "PARSE_003"

    def test_corrupted_pdf_raises(self):
        with pytest.raises(ParsingError) as exc_info:
            PDFTextExtractor().extract_text(b"%PDF-1.4\nthis is not really a pdf")
        assert exc_info.value.error_code == "PARSE_003"

    def test_leading_text_swallows_failures(self):
        assert PDFTextExtractor().leading_text(b"%PDF-1.4\ngarbage", 100) == ""

    def test_leading_text_is_lowercased_and_cut(self):
        assert PDFTextExtractor().leading_text(b"HELLO World", 5) == "hello"


def test_is_pdf():
    assert is_pdf(b"%PDF-1.7 ...")
    assert not is_pdf(b"Type,Amount")


def test_decode_text_falls_back_to_latin1():
    assert decode_text(b"caf\xe9") == "café"
    assert decode_text(b"\xef\xbb\xbfTyp") == "Typ"
