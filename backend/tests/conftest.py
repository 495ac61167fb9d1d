"""
Singers API — Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the whole suite.
How:   Every test that needs storage gets a fresh SQLite file (aiosqlite) with
       the tables created from the ORM metadata. API tests talk to an app
       built around that database through HTTPX's ASGITransport.

Fixtures:
    ├── database:          Database context on a per-test SQLite file
    ├── db_session:        AsyncSession from that database
    ├── mock_db_session:   AsyncMock session for failure injection
    ├── embedded_client:   AsyncClient, SINGER_MODEL=embedded
    ├── relational_client: AsyncClient, SINGER_MODEL=relational
    └── unreachable_client: AsyncClient whose session fails with a refused socket
"""

import os

# Must be set before app.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.config import Settings
from app.database import Database
from app.main import create_app


@pytest_asyncio.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'singers.db'}")
    await db.create_tables()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession.

    Usage:
        mock_db_session.execute.side_effect = OperationalError(...)
        result = await service.list_singers(mock_db_session)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


async def _client_for(model: str, database: Database):
    settings = Settings(database_url=database.url, singer_model=model)
    app = create_app(settings=settings, database=database)
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest_asyncio.fixture
async def embedded_client(database):
    async with await _client_for("embedded", database) as client:
        yield client


@pytest_asyncio.fixture
async def relational_client(database):
    async with await _client_for("relational", database) as client:
        yield client


@pytest.fixture
def queen_payload():
    return {
        "artistname": "Queen",
        "band_members": [
            {"singer_name": "Freddie", "instruments": ["vocals"]},
            {"singer_name": "Brian", "instruments": ["guitar", "vocals"]},
        ],
    }


@pytest_asyncio.fixture
async def unreachable_client(mock_db_session):
    refused = ConnectionRefusedError(111, "Connection refused")
    mock_db_session.execute.side_effect = refused
    mock_db_session.flush.side_effect = refused

    database = MagicMock()
    database.session.return_value.__aenter__.return_value = mock_db_session
    database.session.return_value.__aexit__.return_value = False

    settings = Settings(database_url="sqlite+aiosqlite://", singer_model="embedded")
    app = create_app(settings=settings, database=database)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
