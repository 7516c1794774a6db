"""
Process-wide database connection management.

CONNECTION STRATEGY: single-flight lazy initialization
======================================================

Problem:
  Requests arriving before the database is reachable would each try to open
  their own engine, leaving duplicate pools behind.

Solution:
  One ConnectionManager is owned by the application (app.state.db).

  1. The first acquire() schedules a single connection task
  2. Every concurrent acquire() awaits that same task (shielded, so one
     cancelled caller does not abort the attempt for the others)
  3. On success the engine is cached and returned without reconnecting
  4. On failure the in-flight task is dropped so the next acquire() retries

  A missing DATABASE_URL is a configuration error: it fails immediately and
  nothing is cached or attempted.
"""

import asyncio
from typing import Any, Optional

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from devevents.core.config import Settings
from devevents.core.errors import DatabaseConnectionError
from devevents.core.logging import get_logger
from devevents.core.metrics import record_connection_attempt

logger = get_logger(__name__)


class ConnectionManager:
    """Owns the shared engine and its session factory."""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._pending: Optional[asyncio.Task] = None

    async def acquire(self) -> AsyncEngine:
        """Return the live engine, connecting at most once across concurrent callers."""
        if self._engine is not None:
            return self._engine

        url = self._settings.DATABASE_URL
        if not url:
            logger.error("database_url_missing")
            raise DatabaseConnectionError(
                "DATABASE_URL is not configured; set it in the environment or .env file"
            )

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._connect(url))
            self._pending.add_done_callback(self._attempt_finished)

        pending = self._pending
        try:
            engine = await asyncio.shield(pending)
        except Exception:
            if self._pending is pending:
                self._pending = None
            raise

        if self._pending is pending:
            self._engine = engine
            self._session_factory = async_sessionmaker(
                engine, class_=AsyncSession, expire_on_commit=False
            )
            self._pending = None
        return engine

    async def release(self) -> None:
        """Dispose the cached engine and reset state."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

        engine, self._engine = self._engine, None
        self._session_factory = None
        if engine is not None:
            await engine.dispose()
            logger.info("database_disconnected")

    def status(self) -> bool:
        return self._engine is not None

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            raise DatabaseConnectionError("Database is not connected")
        return self._session_factory

    def _attempt_finished(self, task: asyncio.Task) -> None:
        # Drop failed attempts so the next acquire() starts a fresh one
        if task.cancelled() or task.exception() is not None:
            if self._pending is task:
                self._pending = None

    async def _connect(self, url: str) -> AsyncEngine:
        engine: Optional[AsyncEngine] = None
        try:
            engine = create_async_engine(url, **self._engine_options(url))
            await asyncio.wait_for(self._probe(engine), timeout=self._settings.DB_CONNECT_TIMEOUT)
        except Exception as e:
            if engine is not None:
                await engine.dispose()
            record_connection_attempt(success=False)
            logger.error("database_connection_failed", error=str(e), error_type=type(e).__name__)
            raise DatabaseConnectionError("Could not connect to the database") from e

        record_connection_attempt(success=True)
        logger.info("database_connected", backend=make_url(url).get_backend_name())
        return engine

    @staticmethod
    async def _probe(engine: AsyncEngine) -> None:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    def _engine_options(self, url: str) -> dict[str, Any]:
        settings = self._settings
        parsed = make_url(url)

        if parsed.get_backend_name() == "sqlite":
            # Single shared connection so in-memory databases survive across sessions
            return {
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            }

        options: dict[str, Any] = {
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_timeout": settings.DB_POOL_TIMEOUT,
            "pool_recycle": settings.DB_POOL_RECYCLE,
            "pool_pre_ping": True,
        }
        if parsed.get_driver_name() == "asyncpg":
            options["connect_args"] = {
                "timeout": settings.DB_CONNECT_TIMEOUT,
                "command_timeout": settings.DB_COMMAND_TIMEOUT,
            }
        return options
