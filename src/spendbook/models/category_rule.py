"""Keyword rule mapping a description substring to a category."""
from uuid import UUID

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spendbook.models.base import BaseModel


class CategoryRule(BaseModel):
    """A lowercase keyword that assigns a category on substring match."""

    __tablename__ = "category_rules"

    keyword: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    category_id: Mapped[UUID] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Keywords are stored lowercase, so a plain unique constraint is case-insensitive.
    __table_args__ = (UniqueConstraint("keyword", name="uq_category_rules_keyword"),)

    category: Mapped["Category"] = relationship("Category", back_populates="rules")

    def __repr__(self) -> str:
        return f"<CategoryRule(id={self.id}, keyword={self.keyword})>"
