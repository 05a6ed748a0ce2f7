"""Statement import and reconciliation service.

This module turns uploaded statement files into persisted transactions:
1. Validate the uploaded files
2. Detect each file's bank and parse candidate transactions
3. Deduplicate against what is already stored (multiplicity-aware)
4. Convert to the base currency and categorize
5. Persist everything in one atomic write, with one history entry per file

Imports run either in one call (``import_batch``) or in two phases
(``begin_import`` then ``complete_import``) when the caller needs to supply
conversion rates for the currencies found in the files.
"""

import logging
from collections import Counter
from collections.abc import Mapping, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from spendbook.categorization.rules import Rule, categorize
from spendbook.config import Settings, settings
from spendbook.core.exceptions import (
    PersistenceError,
    SessionExpiredError,
    StatementProcessingError,
)
from spendbook.models.transaction import Transaction
from spendbook.models.upload_log import UploadLog
from spendbook.parsers.registry import ParserRegistry
from spendbook.repositories import RuleRepository, TransactionRepository, UploadLogRepository
from spendbook.schemas.internal import ParsedFile, ParsedTransaction, UploadedFile
from spendbook.schemas.upload import ImportResult, ParseResult
from spendbook.services.sessions import ImportSessionStore
from spendbook.services.uploads import validate_files

logger = logging.getLogger(__name__)


class ReconciliationService:
    """Coordinate parsing, deduplication, conversion and persistence of imports.

    One instance is built per database session; the parser registry and the
    session store are shared, process-wide collaborators passed in by the caller.
    """

    def __init__(
        self,
        db: AsyncSession,
        registry: ParserRegistry,
        session_store: ImportSessionStore,
        config: Settings | None = None,
    ):
        """Initialize the service.

        Args:
            db: Database session for persistence
            registry: Parsers used to detect and parse files
            session_store: Holds phase-1 results for two-phase imports
            config: Settings (base currency, upload limits)
        """
        self.db = db
        self.registry = registry
        self.session_store = session_store
        self.config = config or settings
        self.transaction_repo = TransactionRepository(db)
        self.rule_repo = RuleRepository(db)
        self.upload_log_repo = UploadLogRepository(db)

    async def import_batch(self, files: Sequence[UploadedFile]) -> ImportResult:
        """Parse and import files in one step, with every amount taken as-is (rate 1.0).

        Every file is parsed before anything is written, so a file that
        cannot be parsed aborts the whole batch.

        Raises:
            UploadValidationError: If the files fail validation
            FormatNotRecognizedError: If a file matches no supported bank
            ParsingError: If a recognized file cannot be parsed
            PersistenceError: If the write fails (nothing is committed)
        """
        parsed_files = self._parse_files(files)
        return await self._reconcile(parsed_files, rates={})

    async def begin_import(self, files: Sequence[UploadedFile]) -> ParseResult:
        """Phase 1: parse files and park them in a new session.

        Returns the session id together with the currencies found, so the
        caller can collect conversion rates before completing the import.
        """
        parsed_files = self._parse_files(files)
        session = self.session_store.create(parsed_files)
        transactions = session.transactions

        by_bank: dict[str, int] = {}
        for parsed in parsed_files:
            by_bank[parsed.bank] = by_bank.get(parsed.bank, 0) + len(parsed.transactions)
        by_currency = dict(Counter(txn.currency for txn in transactions))

        logger.info(
            "Import session created",
            extra={
                "session_id": session.session_id,
                "files_count": len(parsed_files),
                "transactions_count": len(transactions),
            },
        )

        return ParseResult(
            session_id=session.session_id,
            parsed=len(transactions),
            currencies=sorted(by_currency),
            by_bank=by_bank,
            by_currency=by_currency,
        )

    async def complete_import(
        self, session_id: str, rates: Mapping[str, float] | None = None
    ) -> ImportResult:
        """Phase 2: consume a session and import it with the given conversion rates.

        ``rates`` maps currency code to the multiplier into the base currency;
        a currency missing from the map is imported at 1.0.

        Raises:
            SessionExpiredError: If the session is unknown, expired or already used
        """
        session = self.session_store.pop(session_id)
        if session is None:
            raise SessionExpiredError(session_id)

        return await self._reconcile(session.files, rates=rates or {})

    def _parse_files(self, files: Sequence[UploadedFile]) -> list[ParsedFile]:
        validate_files(
            files,
            max_size_bytes=self.config.max_upload_size_mb * 1024 * 1024,
            max_files=self.config.max_files_per_upload,
        )

        parsed_files: list[ParsedFile] = []
        for upload in files:
            parser = self.registry.resolve(upload.content, upload.filename)
            transactions = parser.parse(upload.content)
            parsed_files.append(
                ParsedFile(filename=upload.filename, bank=parser.bank_name, transactions=transactions)
            )
            logger.info(
                "Parsed statement file",
                extra={
                    "upload_filename": upload.filename,
                    "bank": parser.bank_name,
                    "transactions_count": len(transactions),
                },
            )
        return parsed_files

    def _conversion_rate(self, currency: str, rates: Mapping[str, float]) -> float:
        if currency == self.config.base_currency:
            return 1.0
        return float(rates.get(currency, 1.0))

    async def _reconcile(
        self, parsed_files: Sequence[ParsedFile], rates: Mapping[str, float]
    ) -> ImportResult:
        """Deduplicate, convert, categorize and persist parsed files atomically.

        Files are processed strictly one after another. Each file's existing
        counts are taken after the previous files' rows have been flushed, so
        a transaction present in two files of the same batch is imported once.
        """
        normalized_rates = {code.strip().upper(): rate for code, rate in rates.items()}
        result = ImportResult(by_bank={bank: 0 for bank in self.registry.get_supported_banks()})

        try:
            rules = await self.rule_repo.list_ordered()

            for parsed in parsed_files:
                imported, duplicates = await self._reconcile_file(
                    parsed, rules, normalized_rates, result
                )
                result.imported += imported
                result.duplicates += duplicates

            await self.db.commit()
        except StatementProcessingError:
            await self.db.rollback()
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error("Import failed, rolled back", extra={"error_type": type(e).__name__})
            raise PersistenceError("DB_001", {"reason": str(e)}) from e

        logger.info(
            "Import completed",
            extra={"imported": result.imported, "duplicates": result.duplicates},
        )
        return result

    async def _reconcile_file(
        self,
        parsed: ParsedFile,
        rules: Sequence[Rule],
        rates: Mapping[str, float],
        result: ImportResult,
    ) -> tuple[int, int]:
        """Stage one file's new transactions; return (imported, duplicates)."""
        if not parsed.transactions:
            return 0, 0

        batch_counts = Counter(txn.signature for txn in parsed.transactions)
        existing_counts = await self.transaction_repo.count_by_signature(batch_counts)

        seen: Counter = Counter()
        new_rows: list[Transaction] = []
        duplicates = 0

        for txn in parsed.transactions:
            signature = txn.signature
            allowed = max(0, batch_counts[signature] - existing_counts.get(signature, 0))
            seen[signature] += 1
            if seen[signature] > allowed:
                duplicates += 1
                continue

            new_rows.append(self._build_transaction(txn, rules, rates))
            result.by_bank[txn.bank] = result.by_bank.get(txn.bank, 0) + 1

        if new_rows:
            await self.transaction_repo.add_all(new_rows)
            await self.upload_log_repo.add(
                UploadLog(filename=parsed.filename, bank=parsed.bank, transaction_count=len(new_rows))
            )

        logger.info(
            "Reconciled statement file",
            extra={
                "upload_filename": parsed.filename,
                "bank": parsed.bank,
                "imported": len(new_rows),
                "duplicates": duplicates,
            },
        )
        return len(new_rows), duplicates

    def _build_transaction(
        self, txn: ParsedTransaction, rules: Sequence[Rule], rates: Mapping[str, float]
    ) -> Transaction:
        rate = self._conversion_rate(txn.currency, rates)
        return Transaction(
            txn_date=txn.transaction_date,
            amount=txn.amount * rate,
            description=txn.description,
            bank=txn.bank,
            category_id=categorize(txn.description, rules),
            original_amount=txn.amount,
            original_currency=txn.currency,
            conversion_rate=rate,
        )
