"""User model owned by the account store."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from authcore.core.extensions import db

from .base import AuditTimestampsMixin, OpaqueIdMixin, ReprMixin


class User(OpaqueIdMixin, ReprMixin, AuditTimestampsMixin, db.Model):
    """
    Account identity as stored in the relational database.

    Fields
    ------
    email : str
        Login email. Stored normalized (lowercase, trimmed). Unique.
    display_name : str
        Public handle. Unique.
    password_hash : str | None
        bcrypt hash; ``None`` for federated-only accounts, which can never
        sign in with a password.
    email_verified_at : datetime | None
        Set once the verification code has been accepted.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(254), nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    email_verified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("display_name", name="uq_users_display_name"),
    )

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize email to lowercase and trimmed form.

        :raises ValueError: If email is missing or has no ``@``.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        if "@" not in v:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("display_name")
    def _require_display_name(self, key: str, value: str) -> str:
        # trimming happens in AuthService.register
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Display name is required.")
        return value
