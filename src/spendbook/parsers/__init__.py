"""Bank statement parsers."""

from spendbook.parsers.base import PositionalTextParser, StatementParser
from spendbook.parsers.csob import CsobParser
from spendbook.parsers.extractor import PDFTextExtractor
from spendbook.parsers.raiffeisen import RaiffeisenParser
from spendbook.parsers.registry import ParserRegistry, build_default_registry
from spendbook.parsers.revolut import RevolutParser

__all__ = [
    "CsobParser",
    "PDFTextExtractor",
    "ParserRegistry",
    "PositionalTextParser",
    "RaiffeisenParser",
    "RevolutParser",
    "StatementParser",
    "build_default_registry",
]
