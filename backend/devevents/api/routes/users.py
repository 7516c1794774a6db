"""
User endpoints: list and create.

Both routes open their session inside the error guard, so an unreachable
database answers with the route's own 500 rather than a 503.
"""

from fastapi import APIRouter, Depends, status

from devevents.api.errors import unexpected_errors
from devevents.db.connection import ConnectionManager
from devevents.db.session import get_connection_manager, open_session
from devevents.schemas.envelope import Envelope
from devevents.schemas.user import UserCreate, UserResponse
from devevents.services.user_service import create_user, list_users

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=Envelope[list[UserResponse]], response_model_exclude_none=True)
async def list_users_endpoint(manager: ConnectionManager = Depends(get_connection_manager)):
    """Return every user with a count."""
    with unexpected_errors("Failed to fetch users", include_unavailable=True):
        async with open_session(manager) as db:
            users = await list_users(db)

    data = [UserResponse.model_validate(u) for u in users]
    return Envelope(data=data, count=len(data))


@router.post(
    "",
    response_model=Envelope[UserResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_user_endpoint(
    user_data: UserCreate,
    manager: ConnectionManager = Depends(get_connection_manager),
):
    """Create a user. 400 on missing fields, 409 if the email is taken."""
    with unexpected_errors("Failed to create user", include_unavailable=True):
        async with open_session(manager) as db:
            user = await create_user(db, user_data)

    return Envelope(data=UserResponse.model_validate(user), message="User created successfully")
