"""Pytest configuration and fixtures for API tests."""

import os
from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from restaurant_api.database import Base, get_db
from restaurant_api.main import app
from restaurant_api.repositories import neighborhood as neighborhood_repo
from restaurant_api.schemas import NeighborhoodCreate, NeighborhoodGeometry

# Use SQLite for local tests, PostgreSQL in CI (when TEST_DATABASE_URL is set)
TEST_DATABASE_URL = os.environ.get(
    "TEST_DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)

is_sqlite = TEST_DATABASE_URL.startswith("sqlite")

# A square around lower Manhattan used by the geospatial tests
SAMPLE_RING = [
    [-74.02, 40.70],
    [-73.97, 40.70],
    [-73.97, 40.75],
    [-74.02, 40.75],
    [-74.02, 40.70],
]


@pytest_asyncio.fixture
async def engine():
    """A fresh database per test.

    The engine is created inside the test's event loop so the driver never
    sees a loop from a previous test.
    """
    if is_sqlite:
        # SQLite in-memory requires StaticPool to keep connection alive
        test_engine = create_async_engine(
            TEST_DATABASE_URL,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Async test client for FastAPI app."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for tests that need direct DB access."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def neighborhood(db_session):
    """A stored neighborhood whose geometry is SAMPLE_RING (no type tag)."""
    created = await neighborhood_repo.create_neighborhoods_bulk(
        db_session,
        [
            NeighborhoodCreate(
                name="Lower Manhattan",
                geometry=NeighborhoodGeometry(coordinates=[SAMPLE_RING]),
            )
        ],
    )
    return created[0]
