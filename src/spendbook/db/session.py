"""Async engine/session factories and first-run schema setup."""

import logging
from pathlib import Path

from sqlalchemy import event, func, select
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from spendbook.config import Settings, settings
from spendbook.models import Category
from spendbook.models.base import Base

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: list[dict[str, str]] = [
    {"name": "Food", "color": "#22c55e"},
    {"name": "Transport", "color": "#3b82f6"},
    {"name": "Shopping", "color": "#f59e0b"},
    {"name": "Entertainment", "color": "#8b5cf6"},
    {"name": "Health", "color": "#ef4444"},
    {"name": "Utilities", "color": "#06b6d4"},
    {"name": "Finance", "color": "#64748b"},
    {"name": "Other", "color": "#9ca3af"},
]


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_from_settings(config: Settings | None = None) -> AsyncEngine:
    """Create the async engine for the configured database URL.

    SQLite connections get foreign keys enforced.
    """
    config = config or settings
    url = make_url(config.database_url)

    # Do not log SQL statement parameters outside development (descriptions can be personal).
    engine = create_async_engine(
        config.database_url,
        echo=(config.db_echo if config.app_env.lower() == "development" else False),
    )
    if url.get_backend_name() == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> None:
    """Create tables if needed and seed the default categories into an empty store."""
    url = engine.url
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with create_session_factory(engine)() as session:
        existing = (await session.execute(select(func.count(Category.id)))).scalar_one()
        if existing == 0:
            session.add_all(Category(**category) for category in DEFAULT_CATEGORIES)
            await session.commit()
            logger.info("Seeded default categories", extra={"count": len(DEFAULT_CATEGORIES)})

