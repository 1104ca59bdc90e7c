import os

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from quickdrop.db import get_session
from quickdrop.main import app
from quickdrop.models.transfer_event import Base

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")


def use_engine(engine) -> None:
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    async def override_session() -> AsyncSession:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_session


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    eng = create_async_engine(TEST_DATABASE_URL or f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await eng.dispose()


@pytest_asyncio.fixture
async def client(test_engine):
    use_engine(test_engine)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as c:
        yield c
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def broken_client(tmp_path):
    # No tables are created, so every query fails inside the driver.
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    use_engine(eng)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as c:
        yield c
    app.dependency_overrides.clear()
    await eng.dispose()
