"""
Tests for the ConnectionManager lifecycle and its single-flight guarantee.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from devevents.core.config import Settings
from devevents.core.errors import DatabaseConnectionError
from devevents.db.connection import ConnectionManager

from tests.conftest import TEST_DATABASE_URL


def fake_engine() -> MagicMock:
    engine = MagicMock(name="engine")
    engine.dispose = AsyncMock()
    return engine


@pytest.mark.asyncio
async def test_concurrent_acquire_connects_once(monkeypatch):
    calls = []
    engine = fake_engine()

    async def slow_connect(self, url):
        calls.append(url)
        await asyncio.sleep(0.01)
        return engine

    monkeypatch.setattr(ConnectionManager, "_connect", slow_connect)
    manager = ConnectionManager(Settings(DATABASE_URL=TEST_DATABASE_URL))

    first, second, third = await asyncio.gather(manager.acquire(), manager.acquire(), manager.acquire())

    assert len(calls) == 1
    assert first is second is third is engine
    assert manager.status() is True


@pytest.mark.asyncio
async def test_cached_engine_is_reused(monkeypatch):
    calls = []

    async def connect(self, url):
        calls.append(url)
        return fake_engine()

    monkeypatch.setattr(ConnectionManager, "_connect", connect)
    manager = ConnectionManager(Settings(DATABASE_URL=TEST_DATABASE_URL))

    engine = await manager.acquire()
    assert await manager.acquire() is engine
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_failed_attempt_is_cleared_for_retry(monkeypatch):
    engine = fake_engine()
    outcomes = [DatabaseConnectionError("Could not connect to the database"), engine]

    async def flaky_connect(self, url):
        await asyncio.sleep(0)
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(ConnectionManager, "_connect", flaky_connect)
    manager = ConnectionManager(Settings(DATABASE_URL=TEST_DATABASE_URL))

    results = await asyncio.gather(manager.acquire(), manager.acquire(), return_exceptions=True)
    assert all(isinstance(r, DatabaseConnectionError) for r in results)
    assert manager.status() is False

    assert await manager.acquire() is engine
    assert outcomes == []


@pytest.mark.asyncio
async def test_missing_database_url_fails_without_attempt(monkeypatch):
    connect = AsyncMock()
    monkeypatch.setattr(ConnectionManager, "_connect", connect)
    manager = ConnectionManager(Settings(DATABASE_URL=None))

    with pytest.raises(DatabaseConnectionError, match="DATABASE_URL"):
        await manager.acquire()

    connect.assert_not_called()
    assert manager.status() is False


@pytest.mark.asyncio
async def test_unreachable_database_raises_connection_error():
    settings = Settings(
        DATABASE_URL="sqlite+aiosqlite:////nonexistent-dir/nested/devevents.db",
        DB_CONNECT_TIMEOUT=2,
    )
    manager = ConnectionManager(settings)

    with pytest.raises(DatabaseConnectionError):
        await manager.acquire()
    assert manager.status() is False


@pytest.mark.asyncio
async def test_release_resets_state():
    manager = ConnectionManager(Settings(DATABASE_URL=TEST_DATABASE_URL))

    first = await manager.acquire()
    assert manager.status() is True

    await manager.release()
    assert manager.status() is False
    with pytest.raises(DatabaseConnectionError):
        manager.session_factory

    second = await manager.acquire()
    assert second is not first
    assert manager.status() is True
    await manager.release()


@pytest.mark.asyncio
async def test_release_without_connection_is_noop():
    manager = ConnectionManager(Settings(DATABASE_URL=TEST_DATABASE_URL))
    await manager.release()
    assert manager.status() is False
