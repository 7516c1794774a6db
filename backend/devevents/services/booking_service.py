"""
Booking service: registering an email address for an event.

INTEGRITY STRATEGY
==================

Problem:
  A booking must never point at an event that does not exist, and the same
  email should not be registered twice for one event.

Approach:
  1. Validate fields (schema: email pattern, event_id present)
  2. If event_id is new or changed, look the event up; missing -> 404
  3. Probe for an existing (event_id, email) pair; found -> 409
  4. Commit; the unique (event_id, email) index rejects concurrent duplicates

  An update that keeps the same event_id skips step 2, so a booking whose
  event was removed out-of-band keeps its dangling reference.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from devevents.models.booking import Booking
from devevents.schemas.booking import BookingCreate, BookingUpdate
from devevents.core.errors import ConflictError, NotFoundError
from devevents.core.logging import get_logger
from devevents.core.metrics import track_write
from devevents.db.session import commit_or_conflict
from devevents.services.validators import changed_fields, verify_event_reference

logger = get_logger(__name__)

DUPLICATE_BOOKING = "This email is already registered for the event"


async def create_booking(db: AsyncSession, booking_data: BookingCreate) -> Booking:
    with track_write("booking"):
        await verify_event_reference(db, booking_data.event_id)
        await _ensure_not_registered(db, booking_data.event_id, booking_data.email)

        booking = Booking(event_id=booking_data.event_id, email=booking_data.email)
        db.add(booking)
        await commit_or_conflict(db, DUPLICATE_BOOKING)
        await db.refresh(booking)

    logger.info("booking_created", booking_id=booking.id, event_id=booking.event_id)
    return booking


async def update_booking(db: AsyncSession, booking_id: int, booking_data: BookingUpdate) -> Booking:
    """Replace a booking's fields; the event reference is re-checked only if it changed."""
    booking = await get_booking(db, booking_id)

    with track_write("booking"):
        values = booking_data.model_dump()
        changed = changed_fields(booking, values)

        if "event_id" in changed:
            await verify_event_reference(db, values["event_id"])
        if changed:
            await _ensure_not_registered(db, values["event_id"], values["email"], exclude_id=booking.id)

        for name in changed:
            setattr(booking, name, values[name])
        await commit_or_conflict(db, DUPLICATE_BOOKING)
        await db.refresh(booking)

    logger.info("booking_updated", booking_id=booking.id, changed=sorted(changed))
    return booking


async def get_booking(db: AsyncSession, booking_id: int) -> Booking:
    result = await db.execute(select(Booking).where(Booking.id == booking_id))
    booking = result.scalar_one_or_none()

    if not booking:
        raise NotFoundError(f"Booking {booking_id} not found")
    return booking


async def list_bookings(db: AsyncSession, event_id: Optional[int] = None) -> list[Booking]:
    """All bookings, optionally narrowed to one event. Uses ix_bookings_event_id."""
    query = select(Booking)
    if event_id is not None:
        query = query.where(Booking.event_id == event_id)

    result = await db.execute(query.order_by(Booking.created_at.desc(), Booking.id.desc()))
    return list(result.scalars().all())


async def _ensure_not_registered(
    db: AsyncSession,
    event_id: int,
    email: str,
    exclude_id: Optional[int] = None,
) -> None:
    query = select(Booking.id).where(Booking.event_id == event_id, Booking.email == email)
    if exclude_id is not None:
        query = query.where(Booking.id != exclude_id)

    existing = await db.execute(query.limit(1))
    if existing.first() is not None:
        logger.warning("booking_duplicate", event_id=event_id)
        raise ConflictError(DUPLICATE_BOOKING)
