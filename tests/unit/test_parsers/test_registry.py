"""Tests for parser registry dispatch."""

import pytest

from spendbook.core.exceptions import FormatNotRecognizedError
from spendbook.parsers import (
    CsobParser,
    ParserRegistry,
    RaiffeisenParser,
    RevolutParser,
    StatementParser,
    build_default_registry,
)


class EverythingParser(StatementParser):
    """Accepts any file; used to check dispatch order."""

    bank_name = "Everything"

    def detect(self, content: bytes, filename: str) -> bool:
        return True

    def parse(self, content: bytes):
        return []


class TestParserRegistry:
    """Test suite for ParserRegistry."""

    def test_default_order(self, registry):
        assert registry.get_supported_banks() == ["CSOB", "Raiffeisen", "Revolut"]
        assert [type(p) for p in registry.get_parsers()] == [
            CsobParser,
            RaiffeisenParser,
            RevolutParser,
        ]

    def test_get_parsers_returns_copy(self, registry):
        registry.get_parsers().clear()
        assert len(registry.get_parsers()) == 3

    def test_resolve_revolut_csv(self, registry, revolut_csv):
        parser = registry.resolve(revolut_csv(), "export.csv")
        assert parser.bank_name == "Revolut"

    def test_resolve_raiffeisen(self, registry, raiffeisen_file):
        parser = registry.resolve(raiffeisen_file.content, raiffeisen_file.filename)
        assert parser.bank_name == "Raiffeisen"

    def test_first_match_wins(self, registry):
        """A filename claimed by several parsers goes to the earliest registered."""
        parser = registry.resolve(b"", "csob_revolut_export.pdf")
        assert parser.bank_name == "CSOB"

    def test_unrecognized_file_names_every_bank(self, registry):
        with pytest.raises(FormatNotRecognizedError) as exc_info:
            registry.resolve(b"just some notes, nothing else", "notes.txt")

        error = exc_info.value
        assert error.error_code == "PARSE_001"
        assert error.details["supported_banks"] == ["CSOB", "Raiffeisen", "Revolut"]
        assert "notes.txt" in str(error)
        assert "CSOB, Raiffeisen, Revolut" in str(error)

    def test_detect_bank_returns_none(self, registry):
        assert registry.detect_bank(b"nothing", "notes.txt") is None

    def test_registered_parser_is_probed_last(self, registry):
        registry.register(EverythingParser())

        assert registry.resolve(b"nothing", "notes.txt").bank_name == "Everything"
        assert registry.resolve(b"", "revolut.csv").bank_name == "Revolut"
        assert registry.get_supported_banks()[-1] == "Everything"

    def test_empty_registry(self):
        with pytest.raises(FormatNotRecognizedError):
            ParserRegistry().resolve(b"x", "a.csv")

    def test_parse_dispatches(self, registry, revolut_csv):
        content = revolut_csv(
            "Card Payment,Current,2025-01-05 10:00:00,2025-01-05 10:00:00,OpenAI,-10.00,0,USD,COMPLETED,1"
        )

        transactions = registry.parse(content, "export.csv")

        assert len(transactions) == 1
        assert transactions[0].bank == "Revolut"

    def test_registries_are_independent(self):
        first = build_default_registry()
        second = build_default_registry()
        first.register(EverythingParser())

        assert len(second.get_parsers()) == 3

    def test_parsers_share_configured_base_currency(self, test_settings):
        config = test_settings.model_copy(update={"base_currency": "EUR"})

        registry = build_default_registry(config)

        assert {parser.base_currency for parser in registry.get_parsers()} == {"EUR"}
