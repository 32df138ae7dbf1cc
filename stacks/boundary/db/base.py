"""
Declarative base, key and timestamp mixins, UTC helpers.

All timestamps are stored timezone-aware. Transcript ordering and the
export header depend on them comparing correctly, so values read back
from SQLite go through ``as_utc`` first.

Dependencies: sqlalchemy
System role: Foundation for the session and message tables
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """
    Normalize a datetime read back from the database to aware UTC.

    SQLite drops tzinfo on round-trip; PostgreSQL keeps it.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Base(DeclarativeBase):
    """Registry for the Stack tables (create_tables builds from its metadata)."""


class UUIDMixin:
    """UUID v4 primary key generated client-side (native UUID on PostgreSQL)."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )


class CreatedAtMixin:
    """
    Creation time, set on insert and never updated.

    Messages set it explicitly to keep it strictly increasing per session.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )


class TimestampMixin(CreatedAtMixin):
    """Creation time plus updated_at, refreshed by every ORM update."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )
