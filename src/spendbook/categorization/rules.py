"""Keyword-based transaction categorization.

Rules are (keyword, category) pairs matched as case-insensitive substrings of
the transaction description. Everything here is pure: callers load the rule
set once and pass it in, so a whole batch is evaluated against one snapshot.

Two tie-breaks exist on purpose:
- ``categorize`` honours the order the rules are supplied in (first match wins)
- bulk application sorts rules by keyword first (``sort_rules_for_bulk``), so
  its result does not depend on storage order
"""

import re
from collections.abc import Iterable, Sequence
from typing import Protocol
from uuid import UUID


class Rule(Protocol):
    keyword: str
    category_id: UUID


# Words too generic to identify a merchant.
STOP_WORDS: frozenset[str] = frozenset(
    {
        # transaction jargon
        "payment",
        "transfer",
        "card",
        "debit",
        "credit",
        "pos",
        "atm",
        "fee",
        "charge",
        "transaction",
        "purchase",
        "withdrawal",
        "deposit",
        "balance",
        "account",
        "ref",
        "reference",
        "number",
        "date",
        # prepositions and articles
        "from",
        "to",
        "the",
        "a",
        "an",
        "and",
        "or",
        "for",
        "of",
        "in",
        "on",
        "at",
        "with",
        "by",
        "as",
        "is",
        "was",
        "be",
        "been",
        "being",
        # currency codes and legal-form abbreviations
        "cz",
        "czk",
        "eur",
        "usd",
        "gbp",
        "s.r.o",
        "sro",
        "a.s",
        "spol",
        # generic corporate words
        "international",
        "service",
        "services",
        "company",
        "group",
        "inc",
        "ltd",
        "llc",
        "corp",
    }
)

MIN_KEYWORD_LENGTH = 3

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


def categorize(description: str | None, rules: Iterable[Rule]) -> UUID | None:
    """Return the category of the first rule whose keyword occurs in the description.

    Args:
        description: Transaction description (any case).
        rules: Rules in priority order.

    Returns:
        Category id, or None when no rule matches.
    """
    text = (description or "").lower()
    if not text:
        return None

    for rule in rules:
        if rule.keyword and rule.keyword.lower() in text:
            return rule.category_id

    return None


def extract_keyword(description: str | None) -> str | None:
    """Pick the first significant word of a description as a rule keyword.

    >>> extract_keyword("Payment STARBUCKS Coffee")
    'starbucks'
    >>> extract_keyword("123 456") is None
    True
    """
    cleaned = _NON_ALNUM.sub(" ", (description or "").lower())
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()

    for word in cleaned.split(" "):
        if len(word) < MIN_KEYWORD_LENGTH:
            continue
        if word in STOP_WORDS:
            continue
        if word.isdigit():
            continue
        return word

    return None


def sort_rules_for_bulk(rules: Iterable[Rule]) -> list[Rule]:
    """Order rules by ascending keyword for deterministic bulk application."""
    return sorted(rules, key=lambda rule: rule.keyword.lower())


def categorize_all(descriptions: Sequence[str], rules: Sequence[Rule]) -> dict[int, UUID]:
    """Categorize many descriptions against one rule snapshot.

    Returns a mapping of description index to category id; unmatched
    descriptions are left out.
    """
    results: dict[int, UUID] = {}
    for index, description in enumerate(descriptions):
        category_id = categorize(description, rules)
        if category_id is not None:
            results[index] = category_id
    return results
