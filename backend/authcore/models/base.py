"""Column mixins for account tables (SQLAlchemy 2.0 typed mappings)."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column


def new_id() -> str:
    """Return a fresh opaque identifier (UUID4, hex form)."""
    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(UTC)


class OpaqueIdMixin:
    """Opaque string primary key ``id``.

    Generated in Python so the value is known before the INSERT and can be
    used as a token subject unchanged.
    """

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)


class AuditTimestampsMixin:
    """``created_at`` / ``updated_at`` written by the application in UTC.

    Attributes
    ----------
    created_at:
        Set once on INSERT.
    updated_at:
        Set on INSERT and bumped on every UPDATE issued through the ORM.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )


class ReprMixin:
    """``<ClassName id=...>`` repr that never prints column values."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={getattr(self, 'id', None)}>"
