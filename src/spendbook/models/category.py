"""Category model: a named spending bucket with a display color."""
from sqlalchemy import Index, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spendbook.models.base import BaseModel


class Category(BaseModel):
    """Category referenced by transactions and rules."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str] = mapped_column(String(20), nullable=False)

    # Rules go with their category; transactions are only un-linked (ON DELETE SET NULL).
    rules: Mapped[list["CategoryRule"]] = relationship(
        "CategoryRule", back_populates="category", passive_deletes="all"
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name})>"


# Names are unique regardless of case ("Food" == "food").
Index("uq_categories_name_lower", func.lower(Category.name), unique=True)
