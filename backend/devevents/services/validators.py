"""
Write-path validation and normalization for events and bookings.

Every create/update runs the same explicit pipeline before anything is
committed:

    field validation  ->  normalization / derived fields  ->  reference and
    uniqueness probes  ->  persist

Field validation is carried by the pydantic schemas. The steps here are gated
on the set of fields the write actually changes, so an update that leaves the
title alone never touches the slug and an update that keeps the event_id never
re-checks the reference.

The uniqueness and reference probes are plain reads followed by a write, not a
transaction. Two concurrent writers can both pass a probe; the unique indexes
on events.slug and bookings(event_id, email) reject the loser at commit time.
"""

import re
from datetime import date, datetime
from typing import Any, Collection, Mapping, Optional, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from devevents.core.errors import FieldValidationError, FieldViolation, ReferentialIntegrityError
from devevents.core.logging import get_logger
from devevents.core.metrics import record_slug_collision
from devevents.models.event import Event

logger = get_logger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

EVENT_FIELDS = frozenset({
    "title", "description", "overview", "image", "venue", "location", "date",
    "time", "mode", "audience", "agenda", "organizer", "tags",
})

FALLBACK_SLUG = "event"

_NON_SLUG_CHARS = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE_RUNS = re.compile(r"\s+")
_HYPHEN_RUNS = re.compile(r"-+")


def validate_fields(schema: type[SchemaT], data: Mapping[str, Any]) -> SchemaT:
    """Validate raw input against *schema*, reporting every violation at once."""
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise FieldValidationError.from_pydantic(e.errors()) from e


def changed_fields(record: Any, values: Mapping[str, Any]) -> set[str]:
    """Names of fields whose incoming value differs from what *record* holds."""
    return {name for name, value in values.items() if getattr(record, name) != value}


# --------------------------------------------------------------------------
# Events
# --------------------------------------------------------------------------

def derive_base_slug(title: str) -> str:
    """
    Lowercase, drop anything outside [A-Za-z0-9_], whitespace and '-', turn
    whitespace runs into single hyphens and squeeze repeated hyphens.
    """
    slug = _NON_SLUG_CHARS.sub("", title.lower().strip())
    slug = _WHITESPACE_RUNS.sub("-", slug)
    slug = _HYPHEN_RUNS.sub("-", slug)
    return slug or FALLBACK_SLUG


async def slug_taken(db: AsyncSession, slug: str, exclude_id: Optional[int] = None) -> bool:
    query = select(Event.id).where(Event.slug == slug)
    if exclude_id is not None:
        query = query.where(Event.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.first() is not None


async def ensure_unique_slug(db: AsyncSession, base: str, exclude_id: Optional[int] = None) -> str:
    """Return *base*, or the first of base-1, base-2, ... not used by another event."""
    candidate = base
    counter = 1
    while await slug_taken(db, candidate, exclude_id):
        record_slug_collision()
        candidate = f"{base}-{counter}"
        counter += 1

    if candidate != base:
        logger.info("slug_suffixed", base=base, slug=candidate)
    return candidate


def normalize_date(value: str) -> str:
    """
    Trim the value and canonicalize it when it is an ISO-8601 date or
    datetime. Free-form dates such as "May 15-16, 2025" are kept verbatim.
    """
    cleaned = value.strip()
    if not cleaned:
        raise ValueError("Date cannot be empty")

    try:
        return date.fromisoformat(cleaned).isoformat()
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(cleaned).isoformat()
    except ValueError:
        return cleaned


def normalize_time(value: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValueError("Time cannot be empty")
    return cleaned


async def prepare_event(db: AsyncSession, event: Event, changed: Collection[str]) -> Event:
    """
    Normalize date/time and derive the slug for the fields in *changed*.

    Schema-validated input is never blank here. Records built some other way
    still get FieldValidationError listing every date/time violation, and the
    slug is only computed once the record is otherwise valid.
    """
    violations: list[FieldViolation] = []

    if "date" in changed:
        try:
            event.date = normalize_date(event.date)
        except ValueError as e:
            violations.append(FieldViolation("date", str(e)))

    if "time" in changed:
        try:
            event.time = normalize_time(event.time)
        except ValueError as e:
            violations.append(FieldViolation("time", str(e)))

    if violations:
        raise FieldValidationError(violations)

    if "title" in changed:
        # Keep the half-updated record out of the probe queries
        with db.no_autoflush:
            event.slug = await ensure_unique_slug(db, derive_base_slug(event.title), exclude_id=event.id)

    return event


# --------------------------------------------------------------------------
# Bookings
# --------------------------------------------------------------------------

async def verify_event_reference(db: AsyncSession, event_id: int) -> None:
    """Raise ReferentialIntegrityError unless an event with *event_id* exists."""
    result = await db.execute(select(Event.id).where(Event.id == event_id))
    if result.scalar_one_or_none() is None:
        logger.warning("booking_reference_missing", event_id=event_id)
        raise ReferentialIntegrityError(f"Event with ID {event_id} does not exist")
