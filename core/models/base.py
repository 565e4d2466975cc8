"""Base model and mixins for all SQLAlchemy models.

Provides:
- Base: Declarative base class for all tables
- TimestampMixin: Adds created_at and updated_at audit columns

Timestamps are produced on the client side so their values are present on
the instance right after a flush, without a refresh round-trip.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base for all bookstore tables."""
    pass


class TimestampMixin:
    """Mixin providing standard audit columns.

    Adds:
    - created_at: Timestamp set on insert
    - updated_at: Timestamp updated on every change
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )
