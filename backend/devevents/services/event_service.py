"""
Event service handling create/read/update of catalogue entries.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from devevents.models.event import Event
from devevents.schemas.event import EventCreate, EventUpdate
from devevents.core.errors import NotFoundError
from devevents.core.logging import get_logger
from devevents.core.metrics import track_write
from devevents.db.session import commit_or_conflict
from devevents.services.validators import EVENT_FIELDS, changed_fields, prepare_event

logger = get_logger(__name__)

SLUG_CONFLICT = "Another event was saved with the same slug; please retry"


async def create_event(db: AsyncSession, event_data: EventCreate) -> Event:
    """Create an event, deriving a unique slug from its title."""
    with track_write("event"):
        event = Event(**event_data.model_dump())
        await prepare_event(db, event, changed=EVENT_FIELDS)

        db.add(event)
        await commit_or_conflict(db, SLUG_CONFLICT)
        await db.refresh(event)

    logger.info("event_created", event_id=event.id, slug=event.slug)
    return event


async def update_event(db: AsyncSession, slug: str, event_data: EventUpdate) -> Event:
    """
    Replace every field of the event at *slug*.
    The slug is re-derived only when the title changes.
    """
    event = await get_event_by_slug(db, slug)

    with track_write("event"):
        values = event_data.model_dump()
        changed = changed_fields(event, values)
        for name in changed:
            setattr(event, name, values[name])

        await prepare_event(db, event, changed=changed)
        await commit_or_conflict(db, SLUG_CONFLICT)
        await db.refresh(event)

    logger.info("event_updated", event_id=event.id, slug=event.slug, changed=sorted(changed))
    return event


async def get_event_by_slug(db: AsyncSession, slug: str) -> Event:
    result = await db.execute(select(Event).where(Event.slug == slug))
    event = result.scalar_one_or_none()

    if not event:
        raise NotFoundError(f"Event '{slug}' not found")
    return event


async def list_events(db: AsyncSession) -> list[Event]:
    """All events, newest first."""
    result = await db.execute(select(Event).order_by(Event.created_at.desc(), Event.id.desc()))
    return list(result.scalars().all())
