"""SQLAlchemy adapter for the :class:`UserRepository` port."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from authcore.models.user import User
from authcore.services._shared.errors import AlreadyExistsError, NotFoundError
from authcore.services._shared.ports import UserRecord, UserRepository
from authcore.services._shared.ports.user_repository import UPDATABLE_FIELDS


def _aware(value: datetime | None) -> datetime | None:
    # SQLite drops tzinfo; values are always written as UTC.
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def to_record(user: User) -> UserRecord:
    """
    Map ORM ``User`` to :class:`UserRecord`.

    :param user: ORM user instance.
    :type user: :class:`authcore.models.user.User`
    :returns: Detached, immutable record.
    :rtype: :class:`UserRecord`
    """
    return UserRecord(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        password_hash=user.password_hash,
        first_name=user.first_name,
        last_name=user.last_name,
        bio=user.bio,
        avatar_url=user.avatar_url,
        email_verified_at=_aware(user.email_verified_at),
        created_at=_aware(user.created_at) or datetime.now(UTC),
        updated_at=_aware(user.updated_at) or datetime.now(UTC),
    )


class SQLAlchemyUserRepository(UserRepository):
    """
    Persistence adapter over the ``users`` table.

    Each write runs in its own short transaction: commit on success, rollback
    on error. Reads never commit.

    :param session_factory: Callable returning the session to use (e.g. the
        Flask-scoped ``db.session``).
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    @property
    def session(self) -> Session:
        return self._session_factory()

    @contextmanager
    def _write(self) -> Iterator[Session]:
        session = self.session
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise

    # ---------------------------- Lookups ----------------------------

    def get_by_id(self, user_id: str) -> UserRecord | None:
        user = self.session.get(User, user_id)
        return to_record(user) if user is not None else None

    def get_by_email(self, email: str) -> UserRecord | None:
        stmt = select(User).where(User.email == email.lower().strip())
        user = self.session.execute(stmt).scalars().first()
        return to_record(user) if user is not None else None

    def get_by_display_name(self, display_name: str) -> UserRecord | None:
        stmt = select(User).where(User.display_name == display_name)
        user = self.session.execute(stmt).scalars().first()
        return to_record(user) if user is not None else None

    # ---------------------------- Writes -----------------------------

    def create_user(
        self,
        *,
        email: str,
        password_hash: str | None,
        display_name: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> UserRecord:
        """
        Insert an unverified user.

        :raises AlreadyExistsError: The email or display name was taken by a
            concurrent insert after the caller's lookups.
        """
        try:
            with self._write() as session:
                user = User(
                    email=email,
                    password_hash=password_hash,
                    display_name=display_name,
                    first_name=first_name,
                    last_name=last_name,
                )
                session.add(user)
                session.flush()
                session.refresh(user)
                record = to_record(user)
        except IntegrityError as exc:
            raise AlreadyExistsError("User already exists") from exc
        return record

    def update_user(self, user_id: str, **fields: Any) -> UserRecord:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)}")
        with self._write() as session:
            user = session.get(User, user_id)
            if user is None:
                raise NotFoundError("User not found")
            for name, value in fields.items():
                setattr(user, name, value)
            session.flush()
            session.refresh(user)
            record = to_record(user)
        return record
