"""Common interface for statement parsers.

Every supported bank format is a ``StatementParser`` subclass exposing
``bank_name``, ``detect`` and ``parse``. The registry only talks to this
interface, so new formats can be added without touching the dispatch code.
"""

import re
from abc import ABC, abstractmethod
from datetime import date

from spendbook.config import settings
from spendbook.parsers.extractor import PDFTextExtractor, decode_text, is_pdf
from spendbook.schemas.internal import ParsedTransaction


class StatementParser(ABC):
    """Base class for bank statement parsers.

    Subclasses implement:
        - detect(): Whether a file belongs to this bank's format
        - parse(): Extract candidate transactions from the raw bytes
    """

    bank_name: str = ""

    def __init__(
        self,
        text_extractor: PDFTextExtractor | None = None,
        base_currency: str | None = None,
    ):
        self.text_extractor = text_extractor or PDFTextExtractor()
        # Currency assumed for rows that do not state one
        self.base_currency = (base_currency or settings.base_currency).upper()

    @abstractmethod
    def detect(self, content: bytes, filename: str) -> bool:
        """Return True if the file matches this parser's bank format."""

    @abstractmethod
    def parse(self, content: bytes) -> list[ParsedTransaction]:
        """Parse raw file content into candidate transactions."""

    @staticmethod
    def is_pdf(content: bytes) -> bool:
        return is_pdf(content)

    @staticmethod
    def decode(content: bytes) -> str:
        return decode_text(content)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(bank={self.bank_name})>"


class PositionalTextParser(StatementParser):
    """Shared helpers for statements reconstructed from linearized page text.

    Subclasses set ``PERIOD_PATTERN`` to the regex whose first group captures
    the statement year near the document head.
    """

    PERIOD_PATTERN: re.Pattern[str] | None = None

    # Space-grouped thousands with comma or dot decimals: "-1 462,00", "109 825.00"
    AMOUNT_BODY = r"-?\d{1,3}(?:\s\d{3})*[.,]\d{2}"

    def _find_statement_year(self, text: str) -> int:
        """Recover the statement year from the period marker, else use the current year."""
        if self.PERIOD_PATTERN is not None:
            match = self.PERIOD_PATTERN.search(text)
            if match:
                return int(match.group(1))
        return date.today().year

    @staticmethod
    def _parse_czech_amount(amount_str: str) -> float:
        """Parse "-1 462,00" / "33 500,00" / "109 825.00" into a float.

        Unparseable input yields 0.0, which callers treat as "no amount".
        """
        cleaned = re.sub(r"\s", "", amount_str).replace(",", ".")
        try:
            return float(cleaned)
        except ValueError:
            return 0.0

    @staticmethod
    def _clean_description(description: str) -> str:
        return re.sub(r"\s+", " ", description).strip()
