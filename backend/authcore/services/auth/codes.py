"""Generation of verification codes and reset tokens."""

from __future__ import annotations

import secrets
from uuid import uuid4


def generate_otp(length: int = 8) -> str:
    """Return ``length`` random decimal digits from the OS CSPRNG."""
    if length < 1:
        raise ValueError("OTP length must be positive.")
    return "".join(secrets.choice("0123456789") for _ in range(length))


def generate_reset_token() -> str:
    """Return an opaque, random password-reset token (UUID4 string)."""
    return str(uuid4())
