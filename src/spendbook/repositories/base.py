"""Base repository with generic data-access operations."""
from typing import Generic, Type, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from spendbook.models.base import BaseModel

T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """Generic repository for any model.

    Writes are added and flushed, never committed: the caller owns the
    transaction boundary so several repositories can share one atomic write.
    """

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model

    async def get_by_id(self, id: UUID) -> T | None:
        """Get a single record by ID."""
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(self.model))
        return int(result.scalar_one())

    async def add(self, obj: T) -> T:
        """Stage a new record and flush it so its defaults are populated."""
        self.db.add(obj)
        await self.db.flush()
        return obj

    async def add_all(self, objs: list[T]) -> list[T]:
        self.db.add_all(objs)
        await self.db.flush()
        return objs
