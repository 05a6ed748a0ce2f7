import sys
from pathlib import Path

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

sys.path.append(str(Path(__file__).parents[1] / "src"))

from spendbook.config import Settings
from spendbook.db.session import create_engine_from_settings, create_session_factory, init_db
from spendbook.models import Category
from spendbook.parsers import build_default_registry
from spendbook.schemas.internal import UploadedFile
from spendbook.services.sessions import ImportSessionStore


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        _env_file=None,
        app_env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'spending.db'}",
        base_currency="CZK",
    )


@pytest.fixture
async def engine(test_settings: Settings):
    """Create and seed the schema, dispose of the engine afterwards."""
    engine = create_engine_from_settings(test_settings)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(engine):
    """Provide a database session on the per-test SQLite file."""
    async with create_session_factory(engine)() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def categories(db_session: AsyncSession) -> dict[str, Category]:
    """Seeded categories keyed by name."""
    result = await db_session.execute(select(Category))
    return {category.name: category for category in result.scalars().all()}


@pytest.fixture
def registry(test_settings):
    return build_default_registry(test_settings)


@pytest.fixture
def session_store(fake_clock: FakeClock) -> ImportSessionStore:
    return ImportSessionStore(max_size=10, ttl_seconds=3600, clock=fake_clock)


ENGLISH_HEADER = "Type,Product,Started Date,Completed Date,Description,Amount,Fee,Currency,State,Balance"
SPANISH_HEADER = (
    "Tipo,Producto,Fecha de inicio,Fecha de finalización,Descripción,Importe,Comisión,Divisa,State,Saldo"
)


@pytest.fixture
def revolut_csv():
    """Builder for Revolut CSV exports: revolut_csv(*rows, spanish=False)."""

    def build(*rows: str, spanish: bool = False) -> bytes:
        header = SPANISH_HEADER if spanish else ENGLISH_HEADER
        return ("\n".join([header, *rows]) + "\n").encode("utf-8")

    return build


RAIFFEISEN_STATEMENT = """Raiffeisenbank a.s.
Výpis z běžného účtu
za období: 121. 12. 2025 - 31. 12. 2025
3. 12. 2025
3. 12. 2025
Platba kartou
PK: 5169 XXXX XXXX 1234
ALBERT 0123; PRAHA; CZ
-1 462,00 CZK
5. 12. 2025
5. 12. 2025
Příchozí úhrada
251123697/0300
Employer s.r.o.
33 500,00 CZK
Raiffeisenbank a.s. Hvězdova 1716/2b
K1234567 v1.0 Strana /2
8. 12. 2025
8. 12. 2025
Poplatek
Vedení účtu
-99,00 CZK
"""


@pytest.fixture
def raiffeisen_file() -> UploadedFile:
    return UploadedFile(
        filename="statement_123456_dec_2025_01.pdf",
        content=RAIFFEISEN_STATEMENT.encode("utf-8"),
    )


@pytest.fixture
def raiffeisen_statement() -> str:
    return RAIFFEISEN_STATEMENT
