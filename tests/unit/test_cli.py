"""Tests for the command line interface (commands that need no database)."""

import argparse
import json
import logging

import pytest

from spendbook.cli import build_parser, main, parse_rate
from spendbook.utils import logger as log_setup


@pytest.fixture(autouse=True)
def reset_root_handlers():
    """Drop the console handlers main() installs so they do not outlive capsys."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, log_setup._HANDLER_MARKER, False):
            root.removeHandler(handler)


def test_parse_rate():
    assert parse_rate("eur=25.12") == ("EUR", 25.12)


@pytest.mark.parametrize("value", ["EUR", "EURO=1", "EUR=abc"])
def test_parse_rate_rejects_bad_values(value):
    with pytest.raises(argparse.ArgumentTypeError):
        parse_rate(value)


def test_import_collects_rates():
    args = build_parser().parse_args(["import", "a.csv", "--rate", "EUR=25", "--rate", "usd=23.5"])
    assert dict(args.rate) == {"EUR": 25.0, "USD": 23.5}


def test_parse_command_prints_summary(tmp_path, capsys, revolut_csv):
    path = tmp_path / "export.csv"
    path.write_bytes(
        revolut_csv(
            "Card Payment,Current,2025-01-05 10:00:00,2025-01-05 10:00:00,OpenAI,-10.00,0,USD,COMPLETED,1",
            "Card Payment,Current,2025-01-06 10:00:00,2025-01-06 10:00:00,Bakery,-50.00,0,CZK,COMPLETED,1",
        )
    )

    assert main(["parse", str(path)]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["files"] == [
        {"filename": "export.csv", "bank": "Revolut", "parsed": 2, "currencies": ["CZK", "USD"]}
    ]


def test_unrecognized_file_exits_non_zero(tmp_path, capsys):
    path = tmp_path / "notes.txt"
    path.write_text("nothing in these notes looks like a statement")

    assert main(["parse", str(path)]) == 1

    err = capsys.readouterr().err
    assert "PARSE_001" in err
    assert "Supported banks: CSOB, Raiffeisen, Revolut" in err
