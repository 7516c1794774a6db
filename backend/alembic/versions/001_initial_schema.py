"""Initial schema: users, events, bookings with indexes and constraints.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONList = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # Events table
    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("overview", sa.Text(), nullable=False),
        sa.Column("image", sa.String(2048), nullable=False),
        sa.Column("venue", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("date", sa.String(100), nullable=False),
        sa.Column("time", sa.String(100), nullable=False),
        sa.Column("mode", sa.String(20), nullable=False),
        sa.Column("audience", sa.String(255), nullable=False),
        sa.Column("agenda", JSONList, nullable=False),
        sa.Column("organizer", sa.String(255), nullable=False),
        sa.Column("tags", JSONList, nullable=False),
        *_timestamps(),
        sa.CheckConstraint("mode IN ('online', 'offline', 'hybrid')", name="check_event_mode"),
    )
    # UNIQUE SLUG: the write path probes for collisions before inserting, but the
    # probe is not transactional. This index is what stops two concurrent creates
    # with the same title from both landing on the same slug.
    op.create_index("ix_events_slug", "events", ["slug"], unique=True)
    op.create_index("ix_events_date", "events", ["date"])
    op.create_index("ix_events_tags", "events", ["tags"], postgresql_using="gin")
    op.create_index("ix_events_mode", "events", ["mode"])

    # Bookings table
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id"), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_bookings_event_id", "bookings", ["event_id"])
    op.create_index("ix_bookings_email", "bookings", ["email"])
    op.create_index("uq_bookings_event_email", "bookings", ["event_id", "email"], unique=True)


def downgrade() -> None:
    op.drop_table("bookings")
    op.drop_table("events")
    op.drop_table("users")
