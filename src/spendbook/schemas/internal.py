"""Internal data schemas for parsed statement data.

These models represent the intermediate parsed data structure
before deduplication, currency conversion and persistence.
"""

from dataclasses import dataclass, field
from datetime import date

from pydantic import BaseModel, Field, field_validator

Signature = tuple[date, float, str, str, str]


class ParsedTransaction(BaseModel):
    """Represents a single candidate transaction extracted from a statement.

    Amounts are signed decimal values in ``currency`` (negative for spending).
    """

    transaction_date: date = Field(..., description="Transaction date")
    amount: float = Field(..., description="Signed amount in the original currency")
    description: str = Field(..., description="Free-text description / merchant")
    bank: str = Field(..., description="Institution identifier (e.g., 'Revolut')")
    currency: str = Field(..., description="ISO currency code of the amount")
    original_category: str | None = Field(
        None, description="Institution-native category label (if available)"
    )

    @field_validator("description")
    @classmethod
    def description_not_empty(cls, v: str) -> str:
        """Ensure description is not empty."""
        if not v or not v.strip():
            raise ValueError("Description cannot be empty")
        return v.strip()

    @field_validator("currency")
    @classmethod
    def currency_upper(cls, v: str) -> str:
        return v.strip().upper()

    @property
    def signature(self) -> Signature:
        """Deduplication key: (date, original amount, description, bank, currency)."""
        return (
            self.transaction_date,
            self.amount,
            self.description,
            self.bank,
            self.currency,
        )


@dataclass
class UploadedFile:
    """Raw file content plus the name it was uploaded under."""

    filename: str
    content: bytes


@dataclass
class ParsedFile:
    """Candidate transactions extracted from one uploaded file."""

    filename: str
    bank: str
    transactions: list[ParsedTransaction] = field(default_factory=list)
