"""Pydantic schemas for import and categorization results."""

from uuid import UUID

from pydantic import BaseModel, Field


class ImportResult(BaseModel):
    """Result of a completed import (single-phase or phase 2)."""

    success: bool = True
    imported: int = Field(0, description="Number of new transactions written")
    duplicates: int = Field(0, description="Number of candidates skipped as duplicates")
    by_bank: dict[str, int] = Field(
        default_factory=dict, description="New transactions per bank"
    )


class ParseResult(BaseModel):
    """Result of phase 1 of a two-phase import."""

    success: bool = True
    session_id: str = Field(description="Token to pass to phase 2")
    parsed: int = Field(description="Number of candidate transactions parsed")
    currencies: list[str] = Field(
        default_factory=list, description="Currencies found in the files (sorted)"
    )
    by_bank: dict[str, int] = Field(
        default_factory=dict, description="Parsed candidates per bank"
    )
    by_currency: dict[str, int] = Field(
        default_factory=dict, description="Parsed candidates per currency"
    )


class LearnResult(BaseModel):
    """Outcome of learning a rule from a description."""

    success: bool
    keyword: str | None = None
    rule_id: UUID | None = None
    already_exists: bool = False
