# tests/unit/infra/test_jwt_token_issuer.py
"""Unit tests for the PyJWT token issuer with a frozen clock."""

from __future__ import annotations

from datetime import timedelta

import jwt
import pytest
from authcore.infra.jwt.jwt_token_issuer import JWTTokenIssuer
from authcore.services._shared.errors import (
    InvalidTokenError,
    TokenExpiredError,
    UnauthorizedError,
)
from authcore.services._shared.ports import TokenKind
from tests.helpers.utils import FrozenClock

ACCESS_SECRET = "access-secret-for-unit-tests-0123456789"
REFRESH_SECRET = "refresh-secret-for-unit-tests-0123456789"


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture()
def issuer(clock) -> JWTTokenIssuer:
    return JWTTokenIssuer(clock=clock)


def test_issue_and_validate_roundtrip(issuer, clock):
    token = issuer.issue("user-1", TokenKind.ACCESS, ACCESS_SECRET, timedelta(minutes=15))

    claims = issuer.validate(token, ACCESS_SECRET, expected_kind=TokenKind.ACCESS)

    assert claims.sub == "user-1"
    assert claims.kind is TokenKind.ACCESS
    assert claims.iat == int(clock.now.timestamp())
    assert claims.exp == claims.iat + 15 * 60
    assert claims.expires_at == clock.now + timedelta(minutes=15)
    assert claims.jti


def test_validate_one_second_before_expiry_succeeds(issuer, clock):
    token = issuer.issue("u", TokenKind.ACCESS, ACCESS_SECRET, timedelta(minutes=15))
    clock.advance(minutes=15, seconds=-1)

    assert issuer.validate(token, ACCESS_SECRET).sub == "u"


def test_validate_at_expiry_instant_succeeds(issuer, clock):
    token = issuer.issue("u", TokenKind.ACCESS, ACCESS_SECRET, timedelta(minutes=15))
    clock.advance(minutes=15)

    assert issuer.validate(token, ACCESS_SECRET).sub == "u"


def test_validate_after_expiry_raises_token_expired(issuer, clock):
    token = issuer.issue("u", TokenKind.REFRESH, REFRESH_SECRET, timedelta(days=7))
    clock.advance(days=7, seconds=1)

    with pytest.raises(TokenExpiredError) as excinfo:
        issuer.validate(token, REFRESH_SECRET, expected_kind=TokenKind.REFRESH)
    assert excinfo.value.code == "token_expired"
    assert isinstance(excinfo.value, UnauthorizedError)


def test_wrong_secret_is_invalid(issuer):
    token = issuer.issue("u", TokenKind.REFRESH, REFRESH_SECRET, timedelta(days=1))

    with pytest.raises(InvalidTokenError):
        issuer.validate(token, ACCESS_SECRET)


def test_kind_mismatch_is_rejected_even_with_same_secret(issuer):
    """A refresh token must never pass as an access token."""
    shared = "same-secret-for-both-token-kinds-0123456789"
    token = issuer.issue("u", TokenKind.REFRESH, shared, timedelta(days=1))

    with pytest.raises(InvalidTokenError, match="access token required"):
        issuer.validate(token, shared, expected_kind=TokenKind.ACCESS)


@pytest.mark.parametrize("garbage", ["", "not-a-jwt", "a.b.c"])
def test_malformed_tokens_are_invalid(issuer, garbage):
    with pytest.raises(InvalidTokenError):
        issuer.validate(garbage, ACCESS_SECRET)


def test_missing_required_claims_are_invalid(issuer, clock):
    token = jwt.encode(
        {"sub": "u", "exp": int(clock.now.timestamp()) + 60}, ACCESS_SECRET, algorithm="HS256"
    )

    with pytest.raises(InvalidTokenError):
        issuer.validate(token, ACCESS_SECRET)


def test_unknown_kind_claim_is_invalid(issuer, clock):
    now = int(clock.now.timestamp())
    token = jwt.encode(
        {"sub": "u", "kind": "admin", "iat": now, "exp": now + 60, "jti": "x"},
        ACCESS_SECRET,
        algorithm="HS256",
    )

    with pytest.raises(InvalidTokenError):
        issuer.validate(token, ACCESS_SECRET)


def test_tokens_minted_in_the_same_second_differ(issuer):
    first = issuer.issue("u", TokenKind.REFRESH, REFRESH_SECRET, timedelta(days=7))
    second = issuer.issue("u", TokenKind.REFRESH, REFRESH_SECRET, timedelta(days=7))

    assert first != second
