from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from authcore.services._shared.errors import StoreUnavailableError
from authcore.services._shared.keys import KeyNamespace
from authcore.services._shared.ports import OneTimeCodeStore


@dataclass(slots=True)
class RedisOneTimeCodeStore(OneTimeCodeStore):
    """
    Redis-backed one-time codes.

    ``consume`` uses ``GETDEL`` (Redis >= 6.2) so a code is handed out at most
    once even under concurrent requests.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    def issue(self, namespace: KeyNamespace, email: str, code: str, ttl: timedelta) -> None:
        try:
            self.r.set(namespace.key(email), code, ex=max(1, int(ttl.total_seconds())))
        except RedisError as exc:
            raise StoreUnavailableError(f"Failed to store one-time code: {exc}") from exc

    def consume(self, namespace: KeyNamespace, email: str) -> str | None:
        try:
            raw = self.r.getdel(namespace.key(email))
        except RedisError as exc:
            raise StoreUnavailableError(f"Failed to consume one-time code: {exc}") from exc
        if raw is None:
            return None
        return raw.decode() if isinstance(raw, bytes | bytearray) else str(raw)
