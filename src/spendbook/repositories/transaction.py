"""Transaction repository with deduplication and categorization queries."""
from collections.abc import Iterable

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from spendbook.models.transaction import Transaction
from spendbook.repositories.base import BaseRepository
from spendbook.schemas.internal import Signature

# Keep the OR-chain of a signature lookup well below SQLite's expression depth limit.
SIGNATURE_CHUNK_SIZE = 200


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for Transaction model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Transaction)

    async def count_by_signature(self, signatures: Iterable[Signature]) -> dict[Signature, int]:
        """
        Count persisted transactions per signature.

        A signature is (date, original amount, description, bank, original
        currency). Signatures with no persisted match are reported as 0.
        """
        wanted = list(dict.fromkeys(signatures))
        counts: dict[Signature, int] = {signature: 0 for signature in wanted}

        for start in range(0, len(wanted), SIGNATURE_CHUNK_SIZE):
            chunk = wanted[start : start + SIGNATURE_CHUNK_SIZE]
            conditions = [
                and_(
                    Transaction.txn_date == txn_date,
                    Transaction.original_amount == amount,
                    Transaction.description == description,
                    Transaction.bank == bank,
                    Transaction.original_currency == currency,
                )
                for txn_date, amount, description, bank, currency in chunk
            ]
            result = await self.db.execute(
                select(
                    Transaction.txn_date,
                    Transaction.original_amount,
                    Transaction.description,
                    Transaction.bank,
                    Transaction.original_currency,
                    func.count().label("total"),
                )
                .where(or_(*conditions))
                .group_by(
                    Transaction.txn_date,
                    Transaction.original_amount,
                    Transaction.description,
                    Transaction.bank,
                    Transaction.original_currency,
                )
            )
            for row in result:
                key = (
                    row.txn_date,
                    row.original_amount,
                    row.description,
                    row.bank,
                    row.original_currency,
                )
                if key in counts:
                    counts[key] = int(row.total)

        return counts

    async def get_uncategorized(self) -> list[Transaction]:
        """All transactions without a category, oldest first."""
        result = await self.db.execute(
            select(Transaction)
            .where(Transaction.category_id.is_(None))
            .order_by(Transaction.txn_date, Transaction.created_at)
        )
        return list(result.scalars().all())

