"""
FastAPI dependencies that hand out database sessions, plus the commit helper
shared by the write services.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from devevents.core.errors import ConflictError
from devevents.core.logging import get_logger
from devevents.db.connection import ConnectionManager

logger = get_logger(__name__)


def get_connection_manager(request: Request) -> ConnectionManager:
    return request.app.state.db


@asynccontextmanager
async def open_session(manager: ConnectionManager) -> AsyncIterator[AsyncSession]:
    """Acquire the shared engine and open a session; uncommitted work is rolled back on close."""
    await manager.acquire()
    async with manager.session_factory() as session:
        yield session


async def get_db(
    manager: ConnectionManager = Depends(get_connection_manager),
) -> AsyncGenerator[AsyncSession, None]:
    async with open_session(manager) as session:
        yield session


async def commit_or_conflict(db: AsyncSession, message: str) -> None:
    """Commit, turning unique-index violations into ConflictError."""
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning("write_conflict", reason=message, error=str(e.orig))
        raise ConflictError(message) from e
