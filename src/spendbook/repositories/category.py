"""Category repository."""
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from spendbook.models.category import Category
from spendbook.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Category)

    async def get_by_name(self, name: str) -> Category | None:
        """Look a category up by name, ignoring case."""
        result = await self.db.execute(
            select(Category).where(func.lower(Category.name) == name.strip().lower())
        )
        return result.scalar_one_or_none()
