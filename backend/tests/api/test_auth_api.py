"""HTTP tests for the ``/api/v1/auth`` blueprint."""

from __future__ import annotations

import fakeredis
import pytest
from authcore.infra.redis.redis_session_registry import RedisSessionRegistry
from tests.factories.user import DEFAULT_PASSWORD, RegisterPayloadFactory, UserFactory
from tests.helpers.utils import cookie_value, otp_from, reset_token_from

BASE = "/api/v1/auth"
COOKIE = "refresh_token"


def _problem(resp, status: int, code: str) -> dict:
    assert resp.status_code == status
    assert resp.mimetype == "application/problem+json"
    body = resp.get_json()
    assert body["code"] == code
    assert body["request_id"]
    return body


def _login(client, email: str, password: str = DEFAULT_PASSWORD):
    return client.post(f"{BASE}/login", json={"email": email, "password": password})


@pytest.fixture()
def verified_user(app):
    return UserFactory(verified=True)


# ------------------------------ Register ---------------------------------- #
def test_register_then_duplicate(client, outbox) -> None:
    payload = RegisterPayloadFactory()

    resp = client.post(f"{BASE}/register", json=payload)
    assert resp.status_code == 201
    assert resp.get_json()["message"].startswith("User created successfully")
    assert outbox.last_to(payload["email"]).subject == "Activate Your Account"

    dup = client.post(f"{BASE}/register", json={**payload, "display_name": "someone-else"})
    body = _problem(dup, 409, "already_exists")
    assert body["detail"] == "Email already registered"


def test_register_validation_errors(client) -> None:
    resp = client.post(f"{BASE}/register", json={"email": "not-an-email", "password": "short"})

    body = _problem(resp, 422, "validation_error")
    errors = body["details"]["errors"]
    assert {"email", "password", "display_name"} <= set(errors)


def test_register_verify_login_flow(client, outbox) -> None:
    payload = RegisterPayloadFactory()
    client.post(f"{BASE}/register", json=payload)

    early = _login(client, payload["email"])
    assert _problem(early, 401, "unauthorized")["detail"] == (
        "Please verify your email before logging in"
    )

    otp = otp_from(outbox.last_to(payload["email"]))
    verified = client.post(f"{BASE}/verify-email", json={"email": payload["email"], "otp": otp})
    assert verified.status_code == 200
    assert verified.get_json()["user"]["is_verified"] is True

    resp = _login(client, payload["email"])
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["access_token"]
    assert body["user"]["email"] == payload["email"]
    assert "password_hash" not in body["user"]


def test_verify_email_with_wrong_otp(client, outbox) -> None:
    payload = RegisterPayloadFactory()
    client.post(f"{BASE}/register", json=payload)
    otp = otp_from(outbox.last_to(payload["email"]))
    wrong = "9" * len(otp) if otp != "9" * len(otp) else "1" * len(otp)

    resp = client.post(f"{BASE}/verify-email", json={"email": payload["email"], "otp": wrong})

    assert _problem(resp, 400, "invalid_input")["detail"] == "Invalid OTP"


def test_resend_verification(client, outbox, verified_user) -> None:
    payload = RegisterPayloadFactory()
    client.post(f"{BASE}/register", json=payload)

    resp = client.post(f"{BASE}/resend-verification", json={"email": payload["email"]})
    assert resp.status_code == 200
    assert len([m for m in outbox.outbox if m.recipient == payload["email"]]) == 2

    again = client.post(f"{BASE}/resend-verification", json={"email": verified_user.email})
    _problem(again, 409, "already_exists")


# ------------------------------ Sessions ---------------------------------- #
def test_login_sets_http_only_refresh_cookie(client, verified_user) -> None:
    resp = _login(client, verified_user.email)

    assert resp.status_code == 200
    header = next(h for h in resp.headers.getlist("Set-Cookie") if h.startswith(f"{COOKIE}="))
    assert "HttpOnly" in header
    assert "SameSite=Strict" in header
    assert "Path=/" in header
    assert f"Max-Age={7 * 24 * 3600}" in header
    assert "Secure" not in header
    assert client.get_cookie(COOKIE) is not None


def test_login_with_bad_credentials(client, verified_user) -> None:
    wrong = _login(client, verified_user.email, "wrong-password")
    ghost = _login(client, "ghost@example.com")

    assert _problem(wrong, 401, "unauthorized")["detail"] == "Invalid email or password"
    assert _problem(ghost, 401, "unauthorized")["detail"] == "Invalid email or password"


def test_refresh_rotates_cookie_and_rejects_reuse(client, verified_user) -> None:
    login = _login(client, verified_user.email)
    old = cookie_value(login.headers.getlist("Set-Cookie"), COOKIE)

    resp = client.post(f"{BASE}/refresh")
    assert resp.status_code == 200
    assert resp.get_json()["access_token"]
    new = cookie_value(resp.headers.getlist("Set-Cookie"), COOKIE)
    assert new and new != old

    client.set_cookie(COOKIE, old)
    replay = client.post(f"{BASE}/refresh")
    assert _problem(replay, 401, "unauthorized")["detail"] == "Invalid refresh token"


def test_refresh_without_cookie(client) -> None:
    resp = client.post(f"{BASE}/refresh")

    assert _problem(resp, 401, "unauthorized")["detail"] == "No refresh token found"


def test_refresh_with_garbage_cookie(client) -> None:
    client.set_cookie(COOKIE, "garbage")

    _problem(client.post(f"{BASE}/refresh"), 401, "invalid_token")


def test_logout_clears_cookie_and_session(client, auth_service, verified_user) -> None:
    _login(client, verified_user.email)
    assert auth_service.sessions.get(verified_user.id) is not None

    resp = client.post(f"{BASE}/logout")

    assert resp.status_code == 200
    assert resp.get_json()["message"] == "Logged out successfully"
    header = next(h for h in resp.headers.getlist("Set-Cookie") if h.startswith(f"{COOKIE}="))
    assert "Max-Age=0" in header
    assert client.get_cookie(COOKIE) is None
    assert auth_service.sessions.get(verified_user.id) is None


def test_logout_without_cookie_still_succeeds(client) -> None:
    resp = client.post(f"{BASE}/logout")

    assert resp.status_code == 200
    assert any(h.startswith(f"{COOKIE}=;") for h in resp.headers.getlist("Set-Cookie"))


# ---------------------------- Password reset ------------------------------ #
def test_forgot_and_reset_password(client, outbox, verified_user) -> None:
    _login(client, verified_user.email)
    resp = client.post(f"{BASE}/forgot-password", json={"email": verified_user.email})
    assert resp.status_code == 200
    token = reset_token_from(outbox.last_to(verified_user.email))

    reset = client.post(
        f"{BASE}/reset-password",
        json={"email": verified_user.email, "token": token, "new_password": "brandnew123"},
    )

    assert reset.status_code == 200
    # the pre-reset session is gone
    _problem(client.post(f"{BASE}/refresh"), 401, "unauthorized")
    _problem(_login(client, verified_user.email), 401, "unauthorized")
    assert _login(client, verified_user.email, "brandnew123").status_code == 200


def test_reset_password_with_unknown_token(client, verified_user) -> None:
    resp = client.post(
        f"{BASE}/reset-password",
        json={"email": verified_user.email, "token": "never-issued", "new_password": "brandnew123"},
    )

    assert _problem(resp, 404, "not_found")["detail"] == "Invalid or expired reset token"


def test_forgot_password_unknown_user(client) -> None:
    resp = client.post(f"{BASE}/forgot-password", json={"email": "ghost@example.com"})

    _problem(resp, 404, "not_found")


# ------------------------------- Errors ----------------------------------- #
def test_store_outage_is_503_without_internal_detail(client, auth_service, verified_user) -> None:
    server = fakeredis.FakeServer()
    server.connected = False
    auth_service.sessions = RedisSessionRegistry(fakeredis.FakeRedis(server=server))

    resp = _login(client, verified_user.email)

    body = _problem(resp, 503, "service_unavailable")
    assert body["detail"] == "Service Unavailable"


def test_logout_during_store_outage_still_clears_cookie(client, auth_service, verified_user) -> None:
    _login(client, verified_user.email)
    server = fakeredis.FakeServer()
    server.connected = False
    auth_service.sessions = RedisSessionRegistry(fakeredis.FakeRedis(server=server))

    resp = client.post(f"{BASE}/logout")

    assert resp.status_code == 200
    header = next(h for h in resp.headers.getlist("Set-Cookie") if h.startswith(f"{COOKIE}="))
    assert "Max-Age=0" in header
    assert client.get_cookie(COOKIE) is None


def test_passwords_over_hash_limit_are_422(client, verified_user) -> None:
    payload = RegisterPayloadFactory(password="p" * 73)

    register = client.post(f"{BASE}/register", json=payload)
    login = _login(client, verified_user.email, "p" * 73)
    reset = client.post(
        f"{BASE}/reset-password",
        json={"email": verified_user.email, "token": "t", "new_password": "\u00e9" * 37},
    )

    assert "password" in _problem(register, 422, "validation_error")["details"]["errors"]
    assert "password" in _problem(login, 422, "validation_error")["details"]["errors"]
    assert "new_password" in _problem(reset, 422, "validation_error")["details"]["errors"]


def test_unknown_route_is_problem_json(client) -> None:
    body = _problem(client.get("/api/v1/nope"), 404, "not_found")

    assert "/api/v1/nope" in body["detail"]
