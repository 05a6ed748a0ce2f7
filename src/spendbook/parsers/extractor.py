"""PDF text linearization using pypdf.

Positional parsers work on a flat sequence of text lines. This module turns
PDF bytes into that text; anything that is not a PDF is assumed to already be
linearized text and is only decoded.
"""

import io
import logging

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from spendbook.core.exceptions import ParsingError

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"


def is_pdf(content: bytes) -> bool:
    """Check the PDF magic bytes."""
    return content[:5] == PDF_MAGIC


def decode_text(content: bytes) -> str:
    """Decode text content, preferring UTF-8 and falling back to latin-1."""
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("latin-1")


class PDFTextExtractor:
    """Wrapper around pypdf for page text extraction.

    All processing happens in-memory without creating temporary files.

    Example:
        >>> extractor = PDFTextExtractor()
        >>> text = extractor.extract_text(pdf_bytes)
        >>> lines = extractor.extract_lines(pdf_bytes)
    """

    def extract_text(self, content: bytes) -> str:
        """Return the document text with pages joined by newlines.

        Raises:
            ParsingError: If the PDF cannot be read (PARSE_003)
        """
        if not content:
            raise ParsingError("PARSE_003", {"reason": "empty"})

        if not is_pdf(content):
            return decode_text(content)

        try:
            reader = PdfReader(io.BytesIO(content))
            if reader.is_encrypted:
                # Statements are sometimes encrypted with an empty user password.
                reader.decrypt("")
            pages = [(page.extract_text() or "") for page in reader.pages]
        except (PyPdfError, ValueError, KeyError) as e:
            logger.warning("PDF text extraction failed", extra={"error_type": type(e).__name__})
            raise ParsingError("PARSE_003", {"reason": str(e)}) from e

        logger.debug("Extracted PDF text", extra={"pages": len(pages)})
        return "\n".join(pages)

    def extract_lines(self, content: bytes) -> list[str]:
        """Return stripped, non-empty text lines in document order."""
        text = self.extract_text(content)
        return [line.strip() for line in text.splitlines() if line.strip()]

    def leading_text(self, content: bytes, limit: int) -> str:
        """Return up to ``limit`` characters of the document head, lower-cased.

        Used by detectors, so extraction failures yield an empty string.
        """
        try:
            return self.extract_text(content)[:limit].lower()
        except ParsingError:
            return ""
