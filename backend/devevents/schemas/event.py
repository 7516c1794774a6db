"""
Pydantic schemas for event-related request/response validation.

Surrounding whitespace is stripped before length checks, `mode` is matched
case-insensitively and `tags` behave like an ordered set. Length limits mirror
the column widths in `devevents.models.event`, so oversized input is reported
per field instead of failing at commit. `date` and `time` must not be blank;
canonicalizing an ISO date happens in the write path, only when it changed.
"""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field, StringConstraints, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

EventMode = Literal["online", "offline", "hybrid"]

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
ShortText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
# Blank values are rejected by EventBase.require_date_and_time
ScheduleText = Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]


class EventBase(BaseModel):
    title: Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=200)]
    description: Annotated[str, StringConstraints(strip_whitespace=True, min_length=10)]
    overview: RequiredText
    image: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=2048)]
    venue: ShortText
    location: ShortText
    date: ScheduleText
    time: ScheduleText
    mode: EventMode
    audience: ShortText
    agenda: list[RequiredText] = Field(..., min_length=1)
    organizer: ShortText
    tags: list[RequiredText] = Field(..., min_length=1)

    @field_validator("date", "time")
    @classmethod
    def require_date_and_time(cls, value: str, info: ValidationInfo) -> str:
        if not value:
            raise PydanticCustomError("blank", "{label} cannot be empty", {"label": info.field_name.capitalize()})
        return value

    @field_validator("mode", mode="before")
    @classmethod
    def lowercase_mode(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))


class EventCreate(EventBase):
    pass


class EventUpdate(EventBase):
    """Full-record replacement; every field is required."""


class EventResponse(BaseModel):
    id: int
    title: str
    slug: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: str
    audience: str
    agenda: list[str]
    organizer: str
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
