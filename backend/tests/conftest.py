"""
Pytest fixtures for test database, client, and sample records.

Every test gets its own in-memory SQLite database (aiosqlite + StaticPool)
behind a fresh ConnectionManager, so nothing leaks between tests.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["REDIS_ENABLED"] = "false"

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession

from devevents.main import app
from devevents.core.config import Settings
from devevents.db.base import Base
from devevents.db.connection import ConnectionManager
from devevents.models.event import Event
from devevents.schemas.event import EventCreate
from devevents.services.event_service import create_event

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def make_event_payload(**overrides) -> dict:
    payload = {
        "title": "React Conf 2025",
        "description": "Two days of React talks and workshops.",
        "overview": "The official React conference.",
        "image": "https://example.com/react.png",
        "venue": "Westin Lake Las Vegas",
        "location": "Henderson, Nevada, USA",
        "date": "May 15-16, 2025",
        "time": "9:00 AM - 6:00 PM PST",
        "mode": "hybrid",
        "audience": "Frontend developers",
        "agenda": ["Keynote", "Talks", "Q&A"],
        "organizer": "Meta Open Source",
        "tags": ["react", "javascript"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def event_payload() -> dict:
    return make_event_payload()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(DATABASE_URL=TEST_DATABASE_URL, REDIS_ENABLED=False)


@pytest_asyncio.fixture
async def manager(test_settings: Settings) -> AsyncGenerator[ConnectionManager, None]:
    """Connected manager with all tables created."""
    manager = ConnectionManager(test_settings)
    engine = await manager.acquire()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield manager

    await manager.release()


@pytest_asyncio.fixture
async def db_session(manager: ConnectionManager) -> AsyncGenerator[AsyncSession, None]:
    async with manager.session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(manager: ConnectionManager) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app, wired to the test ConnectionManager."""
    app.state.db = manager

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    del app.state.db


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession) -> Event:
    """A stored event with slug react-conf-2025."""
    return await create_event(db_session, EventCreate(**make_event_payload()))
