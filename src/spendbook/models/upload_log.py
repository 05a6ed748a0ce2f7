"""Import history: one row per source file that contributed new transactions."""
from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from spendbook.models.base import BaseModel, utcnow


class UploadLog(BaseModel):
    __tablename__ = "upload_log"

    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    bank: Mapped[str] = mapped_column(String(50), nullable=False)
    transaction_count: Mapped[int] = mapped_column(Integer, nullable=False)
    upload_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<UploadLog(id={self.id}, filename={self.filename}, count={self.transaction_count})>"
