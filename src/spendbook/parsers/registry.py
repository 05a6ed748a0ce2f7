"""Bank format detection and parser dispatch.

Parsers are probed in registration order and the first whose ``detect``
accepts the file handles it.
"""

import logging

from spendbook.config import Settings, settings
from spendbook.core.exceptions import FormatNotRecognizedError
from spendbook.parsers.base import StatementParser
from spendbook.parsers.csob import CsobParser
from spendbook.parsers.extractor import PDFTextExtractor
from spendbook.parsers.raiffeisen import RaiffeisenParser
from spendbook.parsers.revolut import RevolutParser
from spendbook.schemas.internal import ParsedTransaction

logger = logging.getLogger(__name__)


class ParserRegistry:
    """Ordered collection of statement parsers."""

    def __init__(self, parsers: list[StatementParser] | None = None):
        self._parsers: list[StatementParser] = list(parsers or [])

    def register(self, parser: StatementParser) -> None:
        """Append a parser; it is probed after all existing ones."""
        self._parsers.append(parser)

    def get_parsers(self) -> list[StatementParser]:
        return list(self._parsers)

    def get_supported_banks(self) -> list[str]:
        return [parser.bank_name for parser in self._parsers]

    def detect_bank(self, content: bytes, filename: str) -> StatementParser | None:
        """Return the first parser that recognizes the file, or None."""
        for parser in self._parsers:
            if parser.detect(content, filename):
                return parser
        return None

    def resolve(self, content: bytes, filename: str) -> StatementParser:
        """Like ``detect_bank`` but raises when nothing matches.

        Raises:
            FormatNotRecognizedError: If no registered parser accepts the file
        """
        parser = self.detect_bank(content, filename)
        if parser is None:
            logger.warning("Unrecognized statement format", extra={"upload_filename": filename})
            raise FormatNotRecognizedError(filename, self.get_supported_banks())

        logger.debug(
            "Detected statement format",
            extra={"upload_filename": filename, "bank": parser.bank_name},
        )
        return parser

    def parse(self, content: bytes, filename: str) -> list[ParsedTransaction]:
        """Detect the format and parse the file in one step."""
        return self.resolve(content, filename).parse(content)


def build_default_registry(
    config: Settings | None = None, text_extractor: PDFTextExtractor | None = None
) -> ParserRegistry:
    """Registry with every built-in bank parser, in detection order.

    Parsers take their default currency from ``config`` (or the global settings).
    """
    base_currency = (config or settings).base_currency
    extractor = text_extractor or PDFTextExtractor()
    return ParserRegistry(
        [
            CsobParser(extractor, base_currency),
            RaiffeisenParser(extractor, base_currency),
            RevolutParser(extractor, base_currency),
        ]
    )
