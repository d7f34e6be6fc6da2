from collections.abc import AsyncIterator
from datetime import date
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import NullPool

import baseentity.models  # noqa: F401 (registers models with Base.metadata)
from baseentity.db._params import SessionFactoryParams
from baseentity.db.session import Base, SessionFactory, get_db
from baseentity.dependencies import get_pricing_environment
from baseentity.main import app
from baseentity.pricing import PricingEnvironment

# Pytest only picks up fixtures from conftest.py files. Fixtures defined in other
# modules (like tests/seeds.py) are invisible unless we register them here.
pytest_plugins = ["tests.seeds"]

TEST_PRICING_ENVIRONMENT = PricingEnvironment(pricing_date=date(2024, 1, 15), calc_env="Test")


def sqlite_params(path: Path) -> SessionFactoryParams:
    return SessionFactoryParams(dialect="SQLite", connection_string=str(path))


@pytest_asyncio.fixture
async def session_factory(tmp_path: Path) -> AsyncIterator[SessionFactory]:
    """Session factory over a fresh SQLite file with all tables created."""
    factory = SessionFactory(sqlite_params(tmp_path / "entities.db"), poolclass=NullPool)
    async with factory.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield factory

    await factory.dispose()


@pytest_asyncio.fixture
async def bare_session_factory(tmp_path: Path) -> AsyncIterator[SessionFactory]:
    """Session factory over an SQLite file with no tables: every query fails."""
    factory = SessionFactory(sqlite_params(tmp_path / "empty.db"), poolclass=NullPool)
    yield factory
    await factory.dispose()


@pytest_asyncio.fixture
async def db(session_factory: SessionFactory) -> AsyncIterator[AsyncSession]:
    async with session_factory.session() as session:
        yield session


async def _client_for(session: AsyncSession) -> AsyncIterator[AsyncClient]:
    async def override_get_db() -> AsyncIterator[AsyncSession]:
        yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_pricing_environment] = lambda: TEST_PRICING_ENVIRONMENT

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncIterator[AsyncClient]:
    """HTTP client that uses the test database session."""
    async for c in _client_for(db):
        yield c


@pytest_asyncio.fixture
async def broken_client(bare_session_factory: SessionFactory) -> AsyncIterator[AsyncClient]:
    """HTTP client whose database has no tables."""
    async with AsyncSession(bare_session_factory.engine, expire_on_commit=False) as session:
        async for c in _client_for(session):
            yield c
