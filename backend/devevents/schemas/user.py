"""
Pydantic schemas for user-related request/response validation.
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, EmailStr, StringConstraints


class UserCreate(BaseModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
    email: EmailStr


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime

    model_config = {"from_attributes": True}
