# authcore/infra/jwt/jwt_token_issuer.py
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from authcore.services._shared.errors import InvalidTokenError, TokenExpiredError
from authcore.services._shared.ports import TokenClaims, TokenIssuer, TokenKind

ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["sub", "kind", "iat", "exp", "jti"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class JWTTokenIssuer(TokenIssuer):
    """
    PyJWT adapter for :class:`TokenIssuer` (HS256).

    Expiry is checked here against :attr:`clock` rather than left to PyJWT,
    so the outcome does not depend on the library's defaults or leeway.

    :param clock: Source of the current UTC time.
    """

    clock: Callable[[], datetime] = field(default=_utcnow)

    def issue(self, user_id: str, kind: TokenKind, secret: str, lifetime: timedelta) -> str:
        now = self.clock()
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "kind": kind.value,
            "iat": int(now.timestamp()),
            "exp": int((now + lifetime).timestamp()),
            "jti": uuid4().hex,
        }
        return jwt.encode(payload, secret, algorithm=ALGORITHM)

    def validate(
        self,
        token: str,
        secret: str,
        *,
        expected_kind: TokenKind | None = None,
    ) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[ALGORITHM],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": REQUIRED_CLAIMS,
                },
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError("Invalid token") from exc

        try:
            claims = TokenClaims(
                sub=str(payload["sub"]),
                kind=TokenKind(payload["kind"]),
                iat=int(payload["iat"]),
                exp=int(payload["exp"]),
                jti=str(payload["jti"]),
            )
        except (TypeError, ValueError) as exc:
            raise InvalidTokenError("Invalid token claims") from exc

        if claims.exp < int(self.clock().timestamp()):
            raise TokenExpiredError()

        # Kind must match even when both kinds are signed with the same secret.
        if expected_kind is not None and claims.kind is not expected_kind:
            raise InvalidTokenError(f"Wrong token type: {expected_kind.value} token required")

        return claims
