from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Protocol


class TokenKind(str, Enum):
    """Kind claim embedded in every token."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Decoded and validated token payload.

    :ivar sub: Subject (user id).
    :ivar kind: Token kind.
    :ivar iat: Issued-at, epoch seconds.
    :ivar exp: Absolute expiry, epoch seconds.
    :ivar jti: Random token identifier.
    """

    sub: str
    kind: TokenKind
    iat: int
    exp: int
    jti: str

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.exp, tz=UTC)


class TokenIssuer(Protocol):
    """
    Port for creating and validating signed, expiring tokens.

    The caller picks the secret matching the kind; ``access`` and ``refresh``
    tokens MUST be signed with distinct secrets.
    """

    def issue(self, user_id: str, kind: TokenKind, secret: str, lifetime: timedelta) -> str:
        """Mint a token with ``exp = now + lifetime``."""
        ...

    def validate(
        self,
        token: str,
        secret: str,
        *,
        expected_kind: TokenKind | None = None,
    ) -> TokenClaims:
        """
        Verify signature, structure, expiry and (optionally) the kind claim.

        :raises InvalidTokenError: Malformed, mis-signed or wrong-kind token.
        :raises TokenExpiredError: Embedded expiry is in the past.
        """
        ...
