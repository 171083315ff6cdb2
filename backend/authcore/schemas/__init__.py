"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    EmailOnlySchema,
    LoginResponseSchema,
    LoginSchema,
    MessageSchema,
    RegisterSchema,
    ResetPasswordSchema,
    TokenResponseSchema,
    UserSchema,
    VerifyEmailSchema,
)

__all__ = [
    "RegisterSchema",
    "VerifyEmailSchema",
    "EmailOnlySchema",
    "LoginSchema",
    "ResetPasswordSchema",
    "UserSchema",
    "LoginResponseSchema",
    "TokenResponseSchema",
    "MessageSchema",
]
