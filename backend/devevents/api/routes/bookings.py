"""
Booking endpoints. Every write verifies that the referenced event exists.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from devevents.api.errors import unexpected_errors
from devevents.db.session import get_db
from devevents.schemas.booking import BookingCreate, BookingUpdate, BookingResponse
from devevents.schemas.envelope import Envelope
from devevents.services.booking_service import create_booking, list_bookings, update_booking

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post(
    "",
    response_model=Envelope[BookingResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking_endpoint(booking_data: BookingCreate, db: AsyncSession = Depends(get_db)):
    """
    Register an email for an event.
    404 if the event does not exist, 409 if the email is already registered.
    """
    with unexpected_errors("Failed to create booking"):
        booking = await create_booking(db, booking_data)

    return Envelope(data=BookingResponse.model_validate(booking), message="Booking created successfully")


@router.put("/{booking_id}", response_model=Envelope[BookingResponse], response_model_exclude_none=True)
async def update_booking_endpoint(
    booking_id: int,
    booking_data: BookingUpdate,
    db: AsyncSession = Depends(get_db),
):
    with unexpected_errors("Failed to update booking"):
        booking = await update_booking(db, booking_id, booking_data)

    return Envelope(data=BookingResponse.model_validate(booking), message="Booking updated successfully")


@router.get("", response_model=Envelope[list[BookingResponse]], response_model_exclude_none=True)
async def list_bookings_endpoint(
    event_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    with unexpected_errors("Failed to fetch bookings"):
        bookings = await list_bookings(db, event_id=event_id)

    data = [BookingResponse.model_validate(b) for b in bookings]
    return Envelope(data=data, count=len(data))
