"""Account authentication and session lifecycle flows."""

from __future__ import annotations

from .dto import (
    AuthSettings,
    ForgotPasswordIn,
    LoginIn,
    LoginOut,
    LogoutIn,
    MessageOut,
    RefreshIn,
    RegisterIn,
    ResendVerificationIn,
    ResetPasswordIn,
    TokenPairOut,
    UserOut,
    VerifyEmailIn,
)
from .service import AuthService

__all__ = [
    "AuthService",
    "AuthSettings",
    "RegisterIn",
    "VerifyEmailIn",
    "ResendVerificationIn",
    "LoginIn",
    "RefreshIn",
    "ForgotPasswordIn",
    "ResetPasswordIn",
    "LogoutIn",
    "MessageOut",
    "UserOut",
    "LoginOut",
    "TokenPairOut",
]
