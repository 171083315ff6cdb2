from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any, Protocol
from uuid import uuid4

from authcore.services._shared.errors import AlreadyExistsError, NotFoundError

# Fields the auth core is allowed to change on an existing user.
UPDATABLE_FIELDS = frozenset(
    {
        "password_hash",
        "display_name",
        "first_name",
        "last_name",
        "bio",
        "avatar_url",
        "email_verified_at",
    }
)


@dataclass(frozen=True, slots=True)
class UserRecord:
    """
    Read-model of a user as seen by the auth core.

    :ivar id: Opaque identifier.
    :ivar email: Unique, normalized email.
    :ivar display_name: Unique public handle.
    :ivar password_hash: ``None`` for federated-only accounts.
    :ivar email_verified_at: Verification timestamp (UTC) or ``None``.
    """

    id: str
    email: str
    display_name: str
    password_hash: str | None
    first_name: str | None
    last_name: str | None
    bio: str | None
    avatar_url: str | None
    email_verified_at: datetime | None
    created_at: datetime
    updated_at: datetime

    @property
    def is_verified(self) -> bool:
        return self.email_verified_at is not None


class UserRepository(Protocol):
    """
    Record-access collaborator owning user rows.

    Lookups return ``None`` for a missing row; they never raise for absence.
    """

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
        Insert an unverified user. Values are stored as given.

        :raises AlreadyExistsError: If the email or display name is taken.
        """
        ...

    def get_by_id(self, user_id: str) -> UserRecord | None: ...

    def get_by_email(self, email: str) -> UserRecord | None: ...

    def get_by_display_name(self, display_name: str) -> UserRecord | None: ...

    def update_user(self, user_id: str, **fields: Any) -> UserRecord:
        """
        Apply a partial update restricted to :data:`UPDATABLE_FIELDS`.

        :raises NotFoundError: If ``user_id`` is unknown.
        :raises ValueError: On a non-whitelisted field.
        """
        ...


class InMemoryUserRepository(UserRepository):
    """Dictionary-backed repository used in unit tests."""

    def __init__(self) -> None:
        self._rows: dict[str, UserRecord] = {}
        self._lock = threading.Lock()

    def create_user(
        self,
        *,
        email: str,
        password_hash: str | None,
        display_name: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> UserRecord:
        email = email.lower().strip()
        with self._lock:
            for row in self._rows.values():
                if row.email == email or row.display_name == display_name:
                    raise AlreadyExistsError("User already exists")
            now = datetime.now(UTC)
            record = UserRecord(
                id=uuid4().hex,
                email=email,
                display_name=display_name,
                password_hash=password_hash,
                first_name=first_name,
                last_name=last_name,
                bio=None,
                avatar_url=None,
                email_verified_at=None,
                created_at=now,
                updated_at=now,
            )
            self._rows[record.id] = record
            return record

    def get_by_id(self, user_id: str) -> UserRecord | None:
        return self._rows.get(user_id)

    def get_by_email(self, email: str) -> UserRecord | None:
        norm = email.lower().strip()
        return next((r for r in self._rows.values() if r.email == norm), None)

    def get_by_display_name(self, display_name: str) -> UserRecord | None:
        return next((r for r in self._rows.values() if r.display_name == display_name), None)

    def update_user(self, user_id: str, **fields: Any) -> UserRecord:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)}")
        with self._lock:
            current = self._rows.get(user_id)
            if current is None:
                raise NotFoundError("User not found")
            updated = replace(current, updated_at=datetime.now(UTC), **fields)
            self._rows[user_id] = updated
            return updated

    def delete(self, user_id: str) -> None:
        """Remove a row (tests simulate account deletion with it)."""
        with self._lock:
            self._rows.pop(user_id, None)
