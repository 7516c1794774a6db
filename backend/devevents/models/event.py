"""
Event model for the tech event catalogue.

Key design decisions:
- `slug` is derived from the title on write and carries a unique index
- `date` and `time` are free-form strings ("May 15-16, 2025" is valid)
- `agenda` and `tags` are JSON lists; tags get a GIN index on PostgreSQL
- `mode` is restricted at the DB level as well as in the schemas
"""

from sqlalchemy import Column, Integer, String, Text, JSON, Index, CheckConstraint
from sqlalchemy.dialects.postgresql import JSONB

from devevents.db.base import Base, TimestampMixin

EVENT_MODES = ("online", "offline", "hybrid")

JSONList = JSON().with_variant(JSONB(), "postgresql")


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True)
    title = Column(String(200), nullable=False)
    slug = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    overview = Column(Text, nullable=False)
    image = Column(String(2048), nullable=False)
    venue = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    date = Column(String(100), nullable=False)
    time = Column(String(100), nullable=False)
    mode = Column(String(20), nullable=False)
    audience = Column(String(255), nullable=False)
    agenda = Column(JSONList, nullable=False)
    organizer = Column(String(255), nullable=False)
    tags = Column(JSONList, nullable=False)

    __table_args__ = (
        CheckConstraint("mode IN ('online', 'offline', 'hybrid')", name="check_event_mode"),
        # Backstop for concurrent writers that race past the slug probe
        Index("ix_events_slug", "slug", unique=True),
        Index("ix_events_date", "date"),
        Index("ix_events_tags", "tags", postgresql_using="gin"),
        Index("ix_events_mode", "mode"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, slug={self.slug}, mode={self.mode})>"
