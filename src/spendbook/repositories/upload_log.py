"""Import history repository."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from spendbook.models.upload_log import UploadLog
from spendbook.repositories.base import BaseRepository


class UploadLogRepository(BaseRepository[UploadLog]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, UploadLog)

    async def list_recent(self, limit: int = 20) -> list[UploadLog]:
        """Most recent import history entries first."""
        result = await self.db.execute(
            select(UploadLog).order_by(UploadLog.upload_date.desc()).limit(limit)
        )
        return list(result.scalars().all())
