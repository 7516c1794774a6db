"""
User service handling account listing and creation.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from devevents.models.user import User
from devevents.schemas.user import UserCreate
from devevents.core.errors import ConflictError
from devevents.core.logging import get_logger
from devevents.core.metrics import track_write
from devevents.db.session import commit_or_conflict

logger = get_logger(__name__)

DUPLICATE_EMAIL = "User with this email already exists"


async def create_user(db: AsyncSession, user_data: UserCreate) -> User:
    """
    Create a user account.
    Raises 409 if a user with the same email is already stored.
    """
    with track_write("user"):
        result = await db.execute(select(User.id).where(User.email == user_data.email))
        if result.first() is not None:
            logger.warning("user_create_failed", reason="email_exists")
            raise ConflictError(DUPLICATE_EMAIL)

        user = User(name=user_data.name, email=user_data.email)
        db.add(user)
        await commit_or_conflict(db, DUPLICATE_EMAIL)
        await db.refresh(user)

    logger.info("user_created", user_id=user.id)
    return user


async def list_users(db: AsyncSession) -> list[User]:
    result = await db.execute(select(User).order_by(User.id))
    return list(result.scalars().all())
