"""Category rule repository."""
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from spendbook.models.category_rule import CategoryRule
from spendbook.repositories.base import BaseRepository


class RuleRepository(BaseRepository[CategoryRule]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, CategoryRule)

    async def get_by_keyword(self, keyword: str) -> CategoryRule | None:
        """Find a rule whose keyword equals ``keyword`` case-insensitively."""
        result = await self.db.execute(
            select(CategoryRule).where(
                func.lower(CategoryRule.keyword) == keyword.strip().lower()
            )
        )
        return result.scalar_one_or_none()

    async def list_ordered(self) -> list[CategoryRule]:
        """All rules in insertion order (creation time, then keyword)."""
        result = await self.db.execute(
            select(CategoryRule).order_by(CategoryRule.created_at, CategoryRule.keyword)
        )
        return list(result.scalars().all())
