"""Raiffeisenbank (CZ) PDF statement parser.

The statement table has no delimiters once the PDF is linearized: each
transaction becomes a block of lines that starts with the posting date and
ends with the line carrying the amount, e.g.::

    3. 12. 2025              <- posting date, starts the block
    3. 12. 2025              <- value date, skipped
    Platba kartou            <- transaction type label
    PK: 5169 XXXX XXXX 1234
    ALBERT 0123; PRAHA; CZ   <- merchant record
    -1 462,00 CZK            <- amount, ends the block
"""

import logging
import re
from datetime import date

from spendbook.parsers.base import PositionalTextParser
from spendbook.schemas.internal import ParsedTransaction

logger = logging.getLogger(__name__)


class RaiffeisenParser(PositionalTextParser):
    """Parser for Raiffeisenbank statements (linearized PDF text)."""

    bank_name = "Raiffeisen"
    currency = "CZK"

    FILENAME_PATTERN = re.compile(r"^statement_\d+_[a-z]{3}_\d{4}_\d{2,3}\.pdf$", re.IGNORECASE)
    FILENAME_MARKERS = ("raiffeisen", "rb_", "raiff")
    # RZBCCZPP is the SWIFT/BIC code of Raiffeisenbank CZ.
    CONTENT_MARKERS = ("raiffeisenbank", "raiffeisen", "rzbcczpp")

    # "za období: 121. 12. 2025 - 31. 12. 2025"; the period number can be fused to the date.
    PERIOD_PATTERN = re.compile(r"za období:.*?(\d{4})")

    DATE_LINE = re.compile(r"^(\d{1,2})\.\s*(\d{1,2})\.\s*(\d{4})$")
    AMOUNT_LINE = re.compile(
        r"(" + PositionalTextParser.AMOUNT_BODY + r")\s*" + currency + r"$"
    )

    FOOTER_MARKERS = ("Raiffeisenbank a.s.", "Strana /")
    FOOTER_PATTERN = re.compile(r"^K\d{7}\s+v\d+\.\d+")

    # Lines that never describe the counterparty.
    SKIP_PATTERNS = [
        re.compile(r"^\d+$"),  # transaction codes
        re.compile(r"^KS:\d+$"),
        re.compile(r"^VS:\d+$"),
        re.compile(r"^SS:\d+$"),
        re.compile(r"^PK:\s*\d+"),  # card numbers
        re.compile(r"^Platba$"),
        re.compile(r"^Platba kartou$"),
        re.compile(r"^Úrok$"),
        re.compile(r"^Poplatek$"),
        re.compile(r"^\d+-?\d*/\d{4}$"),  # account numbers, e.g. 251123697/0300
        re.compile(r"^[A-Z]{2}\d{2}"),  # IBAN prefixes
    ]
    ACCOUNT_INFO_PATTERNS = [re.compile(r"IC\s*\d+"), re.compile(r"^\d+-?\d*$")]

    TRANSACTION_TYPES = (
        "Platba na internetu Apple Pay",
        "Příchozí úhrada",
        "Jednorázová úhrada",
        "Příchozí okamžitá úhrada",
        "Odchozí okamžitá úhrada",
        "Platba kartou",
        "Splátka úvěru",
        "Úrok z úvěru",
        "Vedení účtu",
    )

    # Generic category words the PDF text fuses onto the next word ("PlatbaSplátka úvěru").
    CATEGORY_PREFIXES = ("Platba", "Úrok", "Poplatek")
    CAPITAL_START = re.compile(r"^[A-ZÁČĎÉĚÍŇÓŘŠŤÚŮÝŽ]")
    REFERENCE_PREFIX = re.compile(r"^(?:KS:\d+\s*)?(?:VS:\d+\s*)?")

    UNKNOWN_DESCRIPTION = "Unknown transaction"

    def detect(self, content: bytes, filename: str) -> bool:
        lower_filename = filename.lower()

        if self.FILENAME_PATTERN.match(lower_filename):
            return True
        if any(marker in lower_filename for marker in self.FILENAME_MARKERS):
            return True

        if self.is_pdf(content):
            preview = self.text_extractor.leading_text(content, 10000)
        else:
            preview = content[:4000].decode("utf-8", errors="ignore")[:1000].lower()
        return any(marker in preview for marker in self.CONTENT_MARKERS)

    def parse(self, content: bytes) -> list[ParsedTransaction]:
        text = self.text_extractor.extract_text(content)
        year = self._find_statement_year(text)
        lines = [line.strip() for line in text.split("\n") if line.strip()]

        transactions: list[ParsedTransaction] = []
        dropped = 0

        i = 0
        while i < len(lines):
            date_match = self.DATE_LINE.match(lines[i])
            if not date_match:
                i += 1
                continue

            txn_date = self._to_date(date_match, year)
            block: list[str] = []
            amount: float | None = None
            j = i + 1

            # Value date directly after the posting date carries no content.
            if j < len(lines) and self.DATE_LINE.match(lines[j]):
                j += 1

            while j < len(lines):
                line = lines[j]

                amount_match = self.AMOUNT_LINE.search(line)
                if amount_match:
                    amount = self._parse_czech_amount(amount_match.group(1))
                    # A variable symbol is sometimes fused in front of the amount.
                    text_before = line[: amount_match.start()].strip()
                    if text_before and not text_before.isdigit():
                        block.append(text_before)
                    j += 1
                    break

                if self.DATE_LINE.match(line):
                    break

                if self._is_page_noise(line):
                    j += 1
                    continue

                block.append(line)
                j += 1

            if txn_date is not None and amount is not None and amount != 0:
                transactions.append(
                    ParsedTransaction(
                        transaction_date=txn_date,
                        amount=amount,
                        description=self._extract_description(block),
                        bank=self.bank_name,
                        currency=self.currency,
                    )
                )
            else:
                dropped += 1

            i = j

        logger.info(
            "Parsed Raiffeisen statement",
            extra={
                "statement_year": year,
                "transactions_count": len(transactions),
                "dropped_blocks": dropped,
            },
        )
        return transactions

    def _to_date(self, match: re.Match[str], fallback_year: int) -> date | None:
        day, month, year = match.group(1), match.group(2), match.group(3)
        try:
            return date(int(year or fallback_year), int(month), int(day))
        except ValueError:
            return None

    def _is_page_noise(self, line: str) -> bool:
        return any(marker in line for marker in self.FOOTER_MARKERS) or bool(
            self.FOOTER_PATTERN.match(line)
        )

    def _is_transaction_type(self, line: str) -> bool:
        return any(label in line for label in self.TRANSACTION_TYPES)

    def _extract_description(self, lines: list[str]) -> str:
        """Pick the most descriptive line of a block.

        Priority:
        1. Merchant record ("NAME; CITY; COUNTRY") -> NAME, taken verbatim
        2. First payee-like line that is neither noise nor a type label
        3. First transaction type label
        4. First remaining meaningful line
        5. Placeholder
        """
        for line in lines:
            if ";" in line and not line.startswith("PK:"):
                merchant = self._clean_description(line.split(";")[0])
                return merchant or self.UNKNOWN_DESCRIPTION

        meaningful: list[str] = []
        types: list[str] = []

        for line in lines:
            if any(pattern.search(line) for pattern in self.SKIP_PATTERNS):
                continue
            if len(line) < 3:
                continue
            if self.DATE_LINE.match(line):
                continue
            if self._is_transaction_type(line):
                types.append(line)
                continue
            meaningful.append(line)

        for line in meaningful:
            if any(pattern.search(line) for pattern in self.ACCOUNT_INFO_PATTERNS):
                continue
            return self._finalize(line)

        if types:
            return self._finalize(types[0])

        if meaningful:
            return self._finalize(meaningful[0])

        return self.UNKNOWN_DESCRIPTION

    def _finalize(self, description: str) -> str:
        """Cleanup pass: whitespace, reference-code prefixes, fused category words."""
        cleaned = self.REFERENCE_PREFIX.sub("", self._clean_description(description)).strip()

        for prefix in self.CATEGORY_PREFIXES:
            if cleaned.startswith(prefix) and len(cleaned) > len(prefix):
                rest = cleaned[len(prefix):]
                if self.CAPITAL_START.match(rest):
                    cleaned = rest
                    break

        return cleaned or self.UNKNOWN_DESCRIPTION
