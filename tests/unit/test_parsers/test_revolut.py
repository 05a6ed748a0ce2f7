"""Tests for the Revolut CSV parser."""

from datetime import date

import pytest

from spendbook.core.exceptions import ParsingError
from spendbook.parsers.revolut import RevolutParser


@pytest.fixture
def parser():
    return RevolutParser()


class TestRevolutDetection:
    """Filename and content detection."""

    def test_detect_by_filename(self, parser):
        assert parser.detect(b"", "Revolut_2025.csv")
        assert parser.detect(b"", "account-statement_2025-01-01_2025-01-31_en_abc123.csv")

    def test_detect_by_header_content(self, parser, revolut_csv):
        assert parser.detect(revolut_csv(), "export.csv")
        assert parser.detect(revolut_csv(spanish=True), "export.csv")

    def test_does_not_detect_unrelated_file(self, parser):
        assert not parser.detect(b"date;amount;memo\n2025-01-01;1;x\n", "bank.csv")


class TestRevolutParsing:
    """Row extraction across header vocabularies."""

    def test_parse_english_row(self, parser, revolut_csv):
        content = revolut_csv(
            "Card Payment,Current,2025-01-05 10:00:00,2025-01-06 09:00:00,OpenAI,-505.05,0.00,USD,COMPLETED,1000.00"
        )

        transactions = parser.parse(content)

        assert len(transactions) == 1
        txn = transactions[0]
        assert txn.transaction_date == date(2025, 1, 5)
        assert txn.amount == -505.05
        assert txn.description == "OpenAI"
        assert txn.bank == "Revolut"
        assert txn.currency == "USD"
        assert txn.original_category == "Card Payment"

    def test_same_row_under_both_vocabularies_is_identical(self, parser, revolut_csv):
        """European decimals under Spanish headers give the same record as English ones."""
        english = revolut_csv(
            "Card Payment,Current,2025-01-05 10:00:00,2025-01-06 09:00:00,OpenAI,-505.05,0.00,USD,COMPLETED,1000.00"
        )
        spanish = revolut_csv(
            'Card Payment,Actual,2025-01-05 10:00:00,2025-01-06 09:00:00,OpenAI,"-505,05","0,00",USD,COMPLETADO,"1000,00"',
            spanish=True,
        )

        assert parser.parse(english) == parser.parse(spanish)

    def test_fee_only_row_yields_single_fee_record(self, parser, revolut_csv):
        content = revolut_csv(
            "Fee,Current,2025-02-01 00:00:00,2025-02-01 00:00:00,Plan fee,0.00,349.99,CZK,COMPLETED,100.00"
        )

        transactions = parser.parse(content)

        assert len(transactions) == 1
        assert transactions[0].amount == -349.99
        assert transactions[0].description == "Fee: Plan fee"
        assert transactions[0].original_category == "Fee"

    def test_amount_and_fee_are_split(self, parser, revolut_csv):
        content = revolut_csv(
            "Exchange,Current,2025-02-03 12:00:00,2025-02-03 12:00:00,To EUR,-1000.00,5.00,CZK,COMPLETED,0.00"
        )

        transactions = parser.parse(content)

        assert [t.amount for t in transactions] == [-1000.0, -5.0]
        assert transactions[1].description == "Fee: To EUR"

    def test_quoted_description_with_comma(self, parser, revolut_csv):
        content = revolut_csv(
            'Card Payment,Current,2025-03-01 08:00:00,2025-03-01 08:00:00,"Amazon, ""Prime""",-99.00,0,EUR,COMPLETED,1'
        )

        transactions = parser.parse(content)

        assert transactions[0].description == 'Amazon, "Prime"'
        assert transactions[0].currency == "EUR"

    def test_quoted_description_after_space(self, parser, revolut_csv):
        content = revolut_csv(
            'Card Payment,Current,2025-01-05 10:00:00,2025-01-05 10:00:00, "Shop, Inc",-12.00,0,CZK,COMPLETED,1'
        )

        transactions = parser.parse(content)

        assert [(t.amount, t.description) for t in transactions] == [(-12.0, "Shop, Inc")]
        assert transactions[0].original_category == "Card Payment"

    def test_missing_currency_defaults_to_base(self, parser):
        content = (
            "Type,Started Date,Description,Amount\n"
            "Card Payment,2025-03-02 08:00:00,Bakery,-45.50\n"
        ).encode()

        transactions = parser.parse(content)

        assert transactions[0].currency == "CZK"

    def test_missing_currency_uses_configured_base(self):
        content = (
            "Type,Started Date,Description,Amount\n"
            "Card Payment,2025-03-02 08:00:00,Bakery,-45.50\n"
        ).encode()

        transactions = RevolutParser(base_currency="eur").parse(content)

        assert transactions[0].currency == "EUR"

    def test_rows_kept_whatever_their_state(self, parser, revolut_csv):
        content = revolut_csv(
            "Card Payment,Current,2025-01-05 10:00:00,,Shop,-12.00,0,CZK,PENDING,1",
            "Card Payment,Current,2025-01-06 10:00:00,2025-01-06 10:00:00,Refunded,-3.00,0,CZK,REVERTED,1",
        )

        transactions = parser.parse(content)

        assert [t.description for t in transactions] == ["Shop", "Refunded"]

    def test_semicolon_delimited_export_rejected(self, parser):
        content = (
            "Type;Product;Started Date;Completed Date;Description;Amount;Fee;Currency;State;Balance\n"
            "Card Payment;Current;2025-01-05 10:00:00;2025-01-05 10:00:00;Shop;-12,00;0;CZK;COMPLETED;1\n"
        ).encode()

        with pytest.raises(ParsingError) as exc_info:
            parser.parse(content)

        assert exc_info.value.error_code == "PARSE_002"

    def test_rows_without_date_or_description_are_skipped(self, parser, revolut_csv):
        content = revolut_csv(
            "Card Payment,Current,,2025-01-06 09:00:00,OpenAI,-1.00,0,USD,COMPLETED,1",
            "Card Payment,Current,2025-01-05 10:00:00,2025-01-06 09:00:00,,-1.00,0,USD,COMPLETED,1",
            "Card Payment,Current,not-a-date,2025-01-06 09:00:00,OpenAI,-1.00,0,USD,COMPLETED,1",
            "",
            "Card Payment,Current,2025-01-07 10:00:00,2025-01-07 10:00:00,Kept,-2.00,0,USD,COMPLETED,1",
        )

        transactions = parser.parse(content)

        assert [t.description for t in transactions] == ["Kept"]

    def test_header_only_file_yields_nothing(self, parser, revolut_csv):
        assert parser.parse(revolut_csv()) == []

    def test_unknown_headers_raise(self, parser):
        content = b"Datum,Betrag,Text\n2025-01-01,1,x\n"

        with pytest.raises(ParsingError) as exc_info:
            parser.parse(content)

        assert exc_info.value.error_code == "PARSE_002"
        assert "Spanish" in str(exc_info.value)
        assert "English" in str(exc_info.value)


class TestParseAmount:
    """Locale-tolerant amount parsing."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("1,234.56", 1234.56),
            ("1.234,56", 1234.56),
            ("-505,05", -505.05),
            ("-505.05", -505.05),
            ("12", 12.0),
            ("", 0.0),
            ("abc", 0.0),
        ],
    )
    def test_parse_amount(self, raw, expected):
        assert RevolutParser.parse_amount(raw) == expected
