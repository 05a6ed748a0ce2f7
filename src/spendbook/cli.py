"""
Command line entry point.

    spendbook import statement.csv raiffeisen.pdf
    spendbook import revolut.csv --rate EUR=25.12 --rate USD=23.4
    spendbook parse statement.pdf
    spendbook learn "ALBERT 0123" Food
    spendbook apply-rules
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx

from spendbook.categorization import CategorizationService
from spendbook.config import Settings, get_settings
from spendbook.core.exceptions import CategoryNotFoundError, StatementProcessingError
from spendbook.db.session import create_engine_from_settings, create_session_factory, init_db
from spendbook.parsers import ParserRegistry, build_default_registry
from spendbook.repositories import CategoryRepository, UploadLogRepository
from spendbook.schemas.internal import UploadedFile
from spendbook.services.exchange import ExchangeRateService
from spendbook.services.reconciliation import ReconciliationService
from spendbook.services.sessions import ImportSessionStore
from spendbook.services.uploads import validate_files
from spendbook.utils.logger import setup_logging

logger = logging.getLogger(__name__)


def parse_rate(value: str) -> tuple[str, float]:
    """Parse a ``CUR=RATE`` argument."""
    currency, sep, rate = value.partition("=")
    if not sep or len(currency.strip()) != 3:
        raise argparse.ArgumentTypeError(f"expected CUR=RATE, got {value!r}")
    try:
        return currency.strip().upper(), float(rate)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid rate in {value!r}") from None


def read_files(paths: list[str]) -> list[UploadedFile]:
    return [UploadedFile(filename=Path(p).name, content=Path(p).read_bytes()) for p in paths]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spendbook", description="Import and categorize bank statements"
    )
    parser.add_argument("--log-level", help="Override the configured log level")
    sub = parser.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Import statement files into the database")
    imp.add_argument("files", nargs="+", help="Statement files (CSV or PDF)")
    imp.add_argument(
        "--rate",
        action="append",
        type=parse_rate,
        default=[],
        metavar="CUR=RATE",
        help="Conversion rate into the base currency (repeatable)",
    )
    imp.add_argument(
        "--fetch-rates",
        action="store_true",
        help="Look up rates for foreign currencies not given with --rate",
    )

    parse = sub.add_parser("parse", help="Detect and parse files without importing")
    parse.add_argument("files", nargs="+")

    learn = sub.add_parser("learn", help="Learn a keyword rule from a description")
    learn.add_argument("description")
    learn.add_argument("category", help="Category name")

    add_rule = sub.add_parser("add-rule", help="Add an explicit keyword rule")
    add_rule.add_argument("keyword")
    add_rule.add_argument("category", help="Category name")

    sub.add_parser("apply-rules", help="Categorize uncategorized transactions")

    history = sub.add_parser("history", help="Show recent imports")
    history.add_argument("--limit", type=int, default=20)

    return parser


def cmd_parse(files: list[UploadedFile], registry: ParserRegistry, config: Settings) -> dict[str, Any]:
    validate_files(
        files,
        max_size_bytes=config.max_upload_size_mb * 1024 * 1024,
        max_files=config.max_files_per_upload,
    )
    summary = []
    for upload in files:
        parser = registry.resolve(upload.content, upload.filename)
        transactions = parser.parse(upload.content)
        summary.append(
            {
                "filename": upload.filename,
                "bank": parser.bank_name,
                "parsed": len(transactions),
                "currencies": sorted({txn.currency for txn in transactions}),
            }
        )
    return {"success": True, "files": summary}


async def run_command(args: argparse.Namespace, config: Settings) -> dict[str, Any]:
    registry = build_default_registry(config)

    if args.command == "parse":
        return cmd_parse(read_files(args.files), registry, config)

    engine = create_engine_from_settings(config)
    try:
        await init_db(engine)
        async with create_session_factory(engine)() as db:
            if args.command == "import":
                return await cmd_import(args, db, registry, config)

            categorization = CategorizationService(db)

            if args.command in ("learn", "add-rule"):
                category = await CategoryRepository(db).get_by_name(args.category)
                if category is None:
                    raise CategoryNotFoundError(args.category)
                if args.command == "learn":
                    result = await categorization.learn_rule(args.description, category.id)
                    return result.model_dump(mode="json")
                rule = await categorization.add_rule(args.keyword, category.id)
                return {"success": True, "keyword": rule.keyword, "rule_id": str(rule.id)}

            if args.command == "apply-rules":
                return {"success": True, "categorized": await categorization.bulk_apply()}

            entries = await UploadLogRepository(db).list_recent(args.limit)
            return {
                "success": True,
                "uploads": [
                    {
                        "filename": entry.filename,
                        "bank": entry.bank,
                        "transaction_count": entry.transaction_count,
                        "upload_date": entry.upload_date.isoformat(),
                    }
                    for entry in entries
                ],
            }
    finally:
        await engine.dispose()


async def cmd_import(args: argparse.Namespace, db, registry: ParserRegistry, config: Settings) -> dict[str, Any]:
    service = ReconciliationService(
        db,
        registry,
        ImportSessionStore(
            max_size=config.import_session_max_size,
            ttl_seconds=config.import_session_ttl_seconds,
        ),
        config,
    )
    files = read_files(args.files)

    if not args.rate and not args.fetch_rates:
        return (await service.import_batch(files)).model_dump(mode="json")

    parsed = await service.begin_import(files)
    rates = dict(args.rate)

    if args.fetch_rates:
        missing = [
            c for c in parsed.currencies if c not in rates and c != config.base_currency
        ]
        if missing:
            async with httpx.AsyncClient() as client:
                rates.update(await ExchangeRateService(client, config=config).get_rates(missing))

    logger.info("Completing import with rates", extra={"currencies": sorted(rates)})
    result = await service.complete_import(parsed.session_id, rates)
    return result.model_dump(mode="json")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    config = get_settings()
    setup_logging(args.log_level or config.log_level, config.log_file)

    try:
        output = asyncio.run(run_command(args, config))
    except StatementProcessingError as e:
        logger.debug("Command failed", extra={"error_code": e.error_code})
        print(f"Error [{e.error_code}]: {e.user_message}", file=sys.stderr)
        print(f"  {e}", file=sys.stderr)
        print(f"  {e.suggestion}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
