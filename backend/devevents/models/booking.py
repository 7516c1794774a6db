"""
Booking model: one email address registered for one event.

Key design decisions:
- Non-owning reference to Event; existence is verified in the write path
- Unique (event_id, email) index rejects duplicate registrations
"""

from sqlalchemy import Column, Integer, String, ForeignKey, Index

from devevents.db.base import Base, TimestampMixin


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False)
    email = Column(String(320), nullable=False)

    __table_args__ = (
        Index("ix_bookings_event_id", "event_id"),
        Index("ix_bookings_email", "email"),
        Index("uq_bookings_event_email", "event_id", "email", unique=True),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, event={self.event_id}, email={self.email})>"
