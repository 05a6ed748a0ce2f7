"""CSOB (Československá obchodní banka) PDF statement parser.

Transactions are extracted from the "Přehled pohybů na účtu" section, where
each movement is flattened into a single line::

    DD.MM.<description><4-digit id><amount><balance>
    01.12.Transakce platební kartou 9613-1 462,0015 352,52

The year is not printed on the line; it comes from the statement period.
"""

import logging
import re
from datetime import date

from spendbook.core.exceptions import ParsingError
from spendbook.parsers.base import PositionalTextParser
from spendbook.schemas.internal import ParsedTransaction

logger = logging.getLogger(__name__)


class CsobParser(PositionalTextParser):
    """Parser for CSOB account statements (linearized PDF text)."""

    bank_name = "CSOB"
    currency = "CZK"

    FILENAME_PATTERN = re.compile(r"^\d+_\d{8}_\d+")
    FILENAME_MARKERS = ("csob", "čsob")
    CONTENT_MARKERS = ("československá obchodní banka", "csob", "výpis z účtu")

    # "Období:1. 12. 2025 - 31. 12. 2025"
    PERIOD_PATTERN = re.compile(r"Období:\s*\d+\.\s*\d+\.\s*(\d{4})")

    TRANSACTION_LINE = re.compile(
        r"^(\d{2})\.(\d{2})\.(.+?)(\d{4})(-?\d[\d\s]*,\d{2})(-?\d[\d\s]*,\d{2})$"
    )
    TRANSACTION_START = re.compile(r"^\d{2}\.\d{2}\.")
    PLACE_PREFIX = "Místo:"
    PLACE_LOOKAHEAD = 5

    def detect(self, content: bytes, filename: str) -> bool:
        lower_filename = filename.lower()

        if lower_filename.endswith(".pdf") and self.FILENAME_PATTERN.match(lower_filename):
            return True

        if any(marker in lower_filename for marker in self.FILENAME_MARKERS):
            return True

        if self.is_pdf(content):
            preview = self.text_extractor.leading_text(content, 5000)
            return any(marker in preview for marker in self.CONTENT_MARKERS)

        return False

    @staticmethod
    def _is_header(line: str) -> bool:
        return (
            "Vážená klientko" in line
            or "Víte, že si u nás" in line
            or line.startswith("Datum")
            or line.startswith("Valuta")
            or line == "Označení platby"
            or "Identifikace" in line
            or ("Částka" in line and "Zůstatek" in line)
        )

    def parse(self, content: bytes) -> list[ParsedTransaction]:
        if not self.is_pdf(content) and self.decode(content[:200]).lstrip().startswith(
            ("Datum", "datum")
        ):
            # A CSV export begins with its header row; only the PDF layout is supported.
            raise ParsingError(
                "PARSE_002",
                {"bank": self.bank_name},
                "CSOB parser currently only supports the PDF statement layout.",
            )

        text = self.text_extractor.extract_text(content)
        year = self._find_statement_year(text)
        lines = [line.strip() for line in text.split("\n") if line.strip()]

        transactions: list[ParsedTransaction] = []

        for i, line in enumerate(lines):
            if self._is_header(line):
                continue

            match = self.TRANSACTION_LINE.match(line)
            if not match:
                continue

            day, month, description = match.group(1), match.group(2), match.group(3).strip()
            amount = self._parse_czech_amount(match.group(5))

            try:
                txn_date = date(year, int(month), int(day))
            except ValueError:
                continue

            # A "Místo:" line shortly after names the merchant better than the type label.
            for next_line in lines[i + 1 : i + 1 + self.PLACE_LOOKAHEAD]:
                if next_line.startswith(self.PLACE_PREFIX):
                    description = next_line[len(self.PLACE_PREFIX):].strip()
                    break
                if self.TRANSACTION_START.match(next_line):
                    break

            description = self._clean_description(description)
            if amount == 0 or not description:
                continue

            transactions.append(
                ParsedTransaction(
                    transaction_date=txn_date,
                    amount=amount,
                    description=description,
                    bank=self.bank_name,
                    currency=self.currency,
                )
            )

        logger.info(
            "Parsed CSOB statement",
            extra={"statement_year": year, "transactions_count": len(transactions)},
        )
        return transactions
