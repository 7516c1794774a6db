"""
Pydantic schemas for booking-related request/response validation.
"""

import re
from datetime import datetime

from pydantic import BaseModel, field_validator

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
EMAIL_MAX_LENGTH = 320  # bookings.email column width


class BookingBase(BaseModel):
    event_id: int
    email: str

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        if len(value) > EMAIL_MAX_LENGTH or not EMAIL_PATTERN.match(value):
            raise ValueError("Please provide a valid email address")
        return value


class BookingCreate(BookingBase):
    pass


class BookingUpdate(BookingBase):
    """Full-record replacement of a booking."""


class BookingResponse(BaseModel):
    id: int
    event_id: int
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
