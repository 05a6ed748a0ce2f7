"""Keyword-rule categorization."""

from spendbook.categorization.rules import (
    STOP_WORDS,
    categorize,
    categorize_all,
    extract_keyword,
    sort_rules_for_bulk,
)
from spendbook.categorization.service import CategorizationService

__all__ = [
    "CategorizationService",
    "STOP_WORDS",
    "categorize",
    "categorize_all",
    "extract_keyword",
    "sort_rules_for_bulk",
]
