"""Transaction model representing a persisted, deduplicated statement line."""
from datetime import date, datetime
from uuid import UUID

from sqlalchemy import Date, DateTime, Float, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from spendbook.models.base import BaseModel, utcnow


class Transaction(BaseModel):
    """A transaction converted to the base currency.

    ``amount`` is always ``original_amount * conversion_rate``; the original
    values are kept so the signature used for deduplication stays stable.
    """

    __tablename__ = "transactions"

    txn_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    bank: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    category_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )
    original_amount: Mapped[float] = mapped_column(Float, nullable=False)
    original_currency: Mapped[str] = mapped_column(String(3), nullable=False)
    conversion_rate: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    __table_args__ = (
        Index("ix_transactions_date_bank", "txn_date", "bank"),
        Index(
            "ix_transactions_signature",
            "txn_date",
            "original_amount",
            "description",
            "bank",
            "original_currency",
        ),
    )

    def __repr__(self) -> str:
        return f"<Transaction(id={self.id}, bank={self.bank}, amount={self.amount})>"
