# comments in English; reST docstrings
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from authcore.services._shared.errors import StoreUnavailableError
from authcore.services._shared.keys import KeyNamespace
from authcore.services._shared.ports import SessionRegistry


@dataclass(slots=True)
class RedisSessionRegistry(SessionRegistry):
    """
    Redis-backed registry holding one refresh token per user.

    Rotation relies on ``SET`` being atomic: concurrent writers never merge,
    the last one wins and the loser's token fails on its next refresh.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    @staticmethod
    def _k(user_id: str) -> str:
        return KeyNamespace.REFRESH_TOKEN.key(user_id)

    @staticmethod
    def _ttl(ttl: timedelta) -> int:
        return max(1, int(ttl.total_seconds()))

    def put(self, user_id: str, refresh_token: str, ttl: timedelta) -> None:
        try:
            self.r.set(self._k(user_id), refresh_token, ex=self._ttl(ttl))
        except RedisError as exc:
            raise StoreUnavailableError(f"Failed to store refresh token: {exc}") from exc

    def get(self, user_id: str) -> str | None:
        try:
            raw = self.r.get(self._k(user_id))
        except RedisError as exc:
            raise StoreUnavailableError(f"Failed to read refresh token: {exc}") from exc
        if raw is None:
            return None
        return raw.decode() if isinstance(raw, bytes | bytearray) else str(raw)

    def delete(self, user_id: str) -> None:
        try:
            self.r.delete(self._k(user_id))
        except RedisError as exc:
            raise StoreUnavailableError(f"Failed to delete refresh token: {exc}") from exc
