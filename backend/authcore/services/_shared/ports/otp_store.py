from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta
from typing import Protocol

from authcore.services._shared.keys import KeyNamespace


class OneTimeCodeStore(Protocol):
    """
    Short-lived, single-use codes keyed by ``namespace + email``.

    Reading is destructive: ``consume`` MUST be an atomic get-and-delete so a
    code can be used at most once.
    """

    def issue(self, namespace: KeyNamespace, email: str, code: str, ttl: timedelta) -> None:
        """Store ``code``, replacing any unconsumed one for the same key."""
        ...

    def consume(self, namespace: KeyNamespace, email: str) -> str | None:
        """Atomically fetch and delete the code. ``None`` if absent or expired."""
        ...


class InMemoryOneTimeCodeStore(OneTimeCodeStore):
    """Process-local code store; a lock makes ``consume`` atomic."""

    def __init__(self) -> None:
        self._codes: dict[str, tuple[str, datetime]] = {}
        self._lock = threading.Lock()

    def issue(self, namespace: KeyNamespace, email: str, code: str, ttl: timedelta) -> None:
        with self._lock:
            self._codes[namespace.key(email)] = (code, datetime.now(UTC) + ttl)

    def consume(self, namespace: KeyNamespace, email: str) -> str | None:
        with self._lock:
            entry = self._codes.pop(namespace.key(email), None)
        if entry is None:
            return None
        code, expires_at = entry
        if expires_at <= datetime.now(UTC):
            return None
        return code
