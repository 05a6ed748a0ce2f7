"""Revolut CSV parser.

Supports Revolut account statements exported as CSV. The export's header
row is localized; the column set is matched against each supported
vocabulary (case-insensitive, order-independent).

Spanish headers:
    Tipo,Producto,Fecha de inicio,Fecha de finalización,Descripción,Importe,Comisión,Divisa,State,Saldo

English headers:
    Type,Product,Started Date,Completed Date,Description,Amount,Fee,Currency,State,Balance
"""

import csv
import io
import logging
import re
from datetime import date

from spendbook.core.exceptions import ParsingError
from spendbook.parsers.base import StatementParser
from spendbook.schemas.internal import ParsedTransaction

logger = logging.getLogger(__name__)


class RevolutParser(StatementParser):
    """Parser for Revolut CSV exports in any supported header language."""

    bank_name = "Revolut"

    # Ordering matters: the first vocabulary with every required column wins.
    HEADER_MAPPINGS: dict[str, dict[str, str]] = {
        "spanish": {
            "type": "tipo",
            "start_date": "fecha de inicio",
            "description": "descripción",
            "amount": "importe",
            "fee": "comisión",
            "currency": "divisa",
        },
        "english": {
            "type": "type",
            "start_date": "started date",
            "description": "description",
            "amount": "amount",
            "fee": "fee",
            "currency": "currency",
        },
    }
    REQUIRED_COLUMNS = ("type", "start_date", "description", "amount")

    FILENAME_PATTERN = re.compile(r"revolut.*\.(csv|xlsx)$")
    CONTENT_MARKERS = (
        "completed date",
        "started date",
        "fecha de inicio",
        "fecha de finalización",
        "revolut",
    )

    def detect(self, content: bytes, filename: str) -> bool:
        lower_filename = filename.lower()

        if "revolut" in lower_filename:
            return True

        # account-statement_YYYY-MM-DD_YYYY-MM-DD_locale_hash.csv
        if lower_filename.startswith("account-statement_"):
            return True

        if self.FILENAME_PATTERN.search(lower_filename):
            return True

        preview = content[:2000].decode("utf-8", errors="ignore")[:500].lower()
        return any(marker in preview for marker in self.CONTENT_MARKERS)

    @staticmethod
    def split_line(line: str) -> list[str]:
        """Split one CSV line; quoted commas are literal and "" un-escapes to "."""
        row = next(csv.reader([line], skipinitialspace=True), [])
        return [field.strip() for field in row]

    def detect_header_mapping(self, headers: list[str]) -> dict[str, int] | None:
        """Return column indices for the first vocabulary whose required columns are all present."""
        lower_headers = [h.strip().lower() for h in headers]

        for language, vocabulary in self.HEADER_MAPPINGS.items():
            mapping = {
                column: (lower_headers.index(name) if name in lower_headers else -1)
                for column, name in vocabulary.items()
            }
            if all(mapping[column] != -1 for column in self.REQUIRED_COLUMNS):
                logger.debug("Matched Revolut header vocabulary", extra={"language": language})
                return mapping

        return None

    @staticmethod
    def parse_amount(amount_str: str) -> float:
        """Parse an amount in either US ("1,234.56") or European ("1.234,56") notation.

        Whichever of the last comma and the last dot comes later is the decimal
        separator; the other one is a thousands separator and is dropped.
        """
        cleaned = amount_str.strip().replace(" ", "")
        last_comma = cleaned.rfind(",")
        last_dot = cleaned.rfind(".")

        if last_comma > last_dot:
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")

        try:
            return float(cleaned)
        except ValueError:
            return 0.0

    @staticmethod
    def extract_date(value: str) -> date | None:
        """Take the date part of "YYYY-MM-DD HH:MM:SS" (or a bare "YYYY-MM-DD")."""
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None

    def parse(self, content: bytes) -> list[ParsedTransaction]:
        text = self.decode(content)
        lines = [line for line in re.split(r"\r?\n", text) if line.strip()]

        if len(lines) < 2:
            return []

        headers = self.split_line(lines[0])
        mapping = self.detect_header_mapping(headers)

        if mapping is None:
            raise ParsingError(
                "PARSE_002",
                {"bank": self.bank_name, "headers": headers, "supported": list(self.HEADER_MAPPINGS)},
                "Unable to detect Revolut CSV format. Expected headers not found. "
                "Supported languages: Spanish (Tipo, Fecha de inicio, etc.) "
                "or English (Type, Started Date, etc.)",
            )

        def field(fields: list[str], column: str, default: str = "") -> str:
            index = mapping[column]
            if index == -1 or index >= len(fields):
                return default
            return fields[index] or default

        transactions: list[ParsedTransaction] = []

        for line in lines[1:]:
            fields = self.split_line(line.strip())

            txn_type = field(fields, "type")
            start_date = field(fields, "start_date")
            description = field(fields, "description")
            currency = field(fields, "currency", self.base_currency).upper()

            # Skip rows with no date or description
            if not start_date or not description:
                continue

            txn_date = self.extract_date(start_date)
            if txn_date is None:
                logger.debug("Skipping Revolut row with unparseable date")
                continue

            amount = self.parse_amount(field(fields, "amount", "0"))
            fee = self.parse_amount(field(fields, "fee", "0"))

            if amount != 0:
                transactions.append(
                    ParsedTransaction(
                        transaction_date=txn_date,
                        amount=amount,
                        description=description,
                        bank=self.bank_name,
                        currency=currency,
                        original_category=txn_type or None,
                    )
                )

            # Fees are always an expense, booked as their own transaction.
            if fee != 0:
                transactions.append(
                    ParsedTransaction(
                        transaction_date=txn_date,
                        amount=-abs(fee),
                        description=f"Fee: {description}",
                        bank=self.bank_name,
                        currency=currency,
                        original_category="Fee",
                    )
                )

        logger.info(
            "Parsed Revolut statement",
            extra={"rows": len(lines) - 1, "transactions_count": len(transactions)},
        )
        return transactions
