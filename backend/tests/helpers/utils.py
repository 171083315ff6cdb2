"""Tiny helpers shared across test modules."""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta

from authcore.services._shared.ports import OutgoingEmail


class FrozenClock:
    """Callable clock that only moves when told to.

    Parameters
    ----------
    start: datetime, optional
        Initial instant. Defaults to a fixed, second-aligned UTC time.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2030, 1, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        """Move the clock forward by ``timedelta(**delta)``."""
        self.now = self.now + timedelta(**delta)


def otp_from(email: OutgoingEmail) -> str:
    """Extract the verification code from an activation email link."""
    match = re.search(r"otp=(\d+)", email.html_body)
    if match is None:
        raise AssertionError("No OTP found in email body")
    return match.group(1)


def reset_token_from(email: OutgoingEmail) -> str:
    """Extract the reset token from a password reset email link."""
    match = re.search(r"reset-password\?token=([0-9a-fA-F-]+)", email.html_body)
    if match is None:
        raise AssertionError("No reset token found in email body")
    return match.group(1)


def cookie_value(set_cookie_headers: list[str], name: str) -> str | None:
    """Return the value of ``name`` from raw ``Set-Cookie`` headers."""
    for header in set_cookie_headers:
        if header.startswith(f"{name}="):
            return header.split(";", 1)[0].split("=", 1)[1]
    return None
