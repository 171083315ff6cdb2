from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta
from typing import Protocol

from authcore.services._shared.keys import KeyNamespace


class SessionRegistry(Protocol):
    """
    Stateful record of the single valid refresh token per user.

    ``put`` is an unconditional overwrite (last writer wins) and is the
    rotation primitive. A missing entry means no active session: every refresh
    token of that user is rejected regardless of its signature.
    """

    def put(self, user_id: str, refresh_token: str, ttl: timedelta) -> None:
        """Store ``refresh_token`` as the only valid one for ``user_id``."""
        ...

    def get(self, user_id: str) -> str | None:
        """Return the currently valid refresh token, if any."""
        ...

    def delete(self, user_id: str) -> None:
        """Drop the session, forcing full re-authentication."""
        ...


class InMemorySessionRegistry(SessionRegistry):
    """
    Process-local registry with lazy expiry.

    .. note::
       Uses a threading lock to mimic the atomic ``SET`` of the Redis adapter.
       Suitable for unit tests and single-process development only.
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[str, datetime]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)

    def put(self, user_id: str, refresh_token: str, ttl: timedelta) -> None:
        with self._lock:
            self._entries[KeyNamespace.REFRESH_TOKEN.key(user_id)] = (
                refresh_token,
                self._now() + ttl,
            )

    def get(self, user_id: str) -> str | None:
        key = KeyNamespace.REFRESH_TOKEN.key(user_id)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            token, expires_at = entry
            if expires_at <= self._now():
                del self._entries[key]
                return None
            return token

    def delete(self, user_id: str) -> None:
        with self._lock:
            self._entries.pop(KeyNamespace.REFRESH_TOKEN.key(user_id), None)
