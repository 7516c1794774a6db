"""
Event endpoints with Redis caching on the listing.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from devevents.api.errors import unexpected_errors
from devevents.db.session import get_db
from devevents.schemas.booking import BookingResponse
from devevents.schemas.envelope import Envelope
from devevents.schemas.event import EventCreate, EventUpdate, EventResponse
from devevents.services.booking_service import list_bookings
from devevents.services.event_service import create_event, get_event_by_slug, list_events, update_event
from devevents.services.cache_service import get_cached_events, set_cached_events, invalidate_event_cache
from devevents.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/events", tags=["Events"])


@router.get("", response_model=Envelope[list[EventResponse]], response_model_exclude_none=True)
async def list_events_endpoint(db: AsyncSession = Depends(get_db)):
    """
    List every event.
    Served from Redis when cached; the cache is dropped on event writes.
    """
    cached = await get_cached_events()
    if cached is not None:
        logger.info("events_list_cache_hit", count=len(cached))
        return Envelope(data=cached, count=len(cached))

    with unexpected_errors("Failed to fetch events"):
        events = await list_events(db)

    data = [EventResponse.model_validate(e).model_dump(mode="json") for e in events]
    await set_cached_events(data)
    return Envelope(data=data, count=len(data))


@router.post(
    "",
    response_model=Envelope[EventResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_event_endpoint(event_data: EventCreate, db: AsyncSession = Depends(get_db)):
    """Create an event; the slug is derived from the title."""
    with unexpected_errors("Failed to create event"):
        event = await create_event(db, event_data)

    await invalidate_event_cache()
    return Envelope(data=EventResponse.model_validate(event), message="Event created successfully")


@router.get("/{slug}", response_model=Envelope[EventResponse], response_model_exclude_none=True)
async def get_event_endpoint(slug: str, db: AsyncSession = Depends(get_db)):
    with unexpected_errors("Failed to fetch event"):
        event = await get_event_by_slug(db, slug)

    return Envelope(data=EventResponse.model_validate(event))


@router.put("/{slug}", response_model=Envelope[EventResponse], response_model_exclude_none=True)
async def update_event_endpoint(slug: str, event_data: EventUpdate, db: AsyncSession = Depends(get_db)):
    """Replace an event. A new title yields a new slug."""
    with unexpected_errors("Failed to update event"):
        event = await update_event(db, slug, event_data)

    await invalidate_event_cache()
    return Envelope(data=EventResponse.model_validate(event), message="Event updated successfully")


@router.get(
    "/{slug}/bookings",
    response_model=Envelope[list[BookingResponse]],
    response_model_exclude_none=True,
)
async def list_event_bookings_endpoint(slug: str, db: AsyncSession = Depends(get_db)):
    with unexpected_errors("Failed to fetch bookings"):
        event = await get_event_by_slug(db, slug)
        bookings = await list_bookings(db, event_id=event.id)

    data = [BookingResponse.model_validate(b) for b in bookings]
    return Envelope(data=data, count=len(data))
