# authcore/services/auth/dto.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from authcore.services._shared.ports import UserRecord

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for self-registration.

    :param email: Login email (normalized by the service).
    :param password: Raw password (hashed by the service).
    :param display_name: Unique public handle.
    :param first_name: Optional given name.
    :param last_name: Optional family name.
    """

    email: str
    password: str
    display_name: str
    first_name: str | None = None
    last_name: str | None = None


@dataclass(frozen=True, slots=True)
class VerifyEmailIn:
    """
    Input DTO for email verification.

    :param email: Address being verified.
    :param otp: Code received by email.
    """

    email: str
    otp: str


@dataclass(frozen=True, slots=True)
class ResendVerificationIn:
    email: str


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :param password: Raw password (to be verified).
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT, usually read from a cookie.
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class ForgotPasswordIn:
    email: str


@dataclass(frozen=True, slots=True)
class ResetPasswordIn:
    """
    Input DTO for password reset.

    :param email: Account email; the reset token is looked up by it.
    :param token: Token received by email.
    :param new_password: Raw replacement password.
    """

    email: str
    token: str
    new_password: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param refresh_token: Refresh token from the client cookie, if any.
    """

    refresh_token: str | None = None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class MessageOut:
    message: str


@dataclass(frozen=True, slots=True)
class UserOut:
    """
    Public view of a user. Never carries the password hash.

    :param id: Opaque user id.
    :param email: Normalized email.
    :param display_name: Public handle.
    :param email_verified_at: Verification timestamp or ``None``.
    """

    id: str
    email: str
    display_name: str
    first_name: str | None
    last_name: str | None
    bio: str | None
    avatar_url: str | None
    email_verified_at: datetime | None
    created_at: datetime

    @property
    def is_verified(self) -> bool:
        return self.email_verified_at is not None

    @classmethod
    def from_record(cls, record: UserRecord) -> UserOut:
        return cls(
            id=record.id,
            email=record.email,
            display_name=record.display_name,
            first_name=record.first_name,
            last_name=record.last_name,
            bio=record.bio,
            avatar_url=record.avatar_url,
            email_verified_at=record.email_verified_at,
            created_at=record.created_at,
        )


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :param refresh_token: Encoded refresh JWT.
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class LoginOut:
    """
    Output DTO for a successful login.

    :param user: Authenticated user.
    :param tokens: Freshly issued pair; the refresh token is already registered.
    """

    user: UserOut
    tokens: TokenPairOut


# ------------------------------ Settings ---------------------------------- #

DEFAULT_FRONTEND_URL = "http://localhost:5173"
DEFAULT_MAIL_FROM = "no-reply@localhost"
DEFAULT_SUPPORT_EMAIL = "support@localhost"


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """
    Immutable configuration of the auth flows, built once at start-up.

    :param access_secret: Signing key for access tokens.
    :param refresh_secret: Signing key for refresh tokens (distinct).
    :param access_ttl: Access token lifetime.
    :param refresh_ttl: Refresh token lifetime and session entry TTL.
    :param otp_ttl: Verification code lifetime.
    :param otp_length: Digits per verification code.
    :param reset_ttl_multiplier: Reset tokens live ``otp_ttl * multiplier``.
    :param frontend_url: Base of activation/reset links.
    :param mail_from: Sender address.
    :param support_email: Contact shown in email footers.
    """

    access_secret: str
    refresh_secret: str
    access_ttl: timedelta = timedelta(minutes=15)
    refresh_ttl: timedelta = timedelta(days=7)
    otp_ttl: timedelta = timedelta(minutes=10)
    otp_length: int = 8
    reset_ttl_multiplier: int = 2
    frontend_url: str = DEFAULT_FRONTEND_URL
    mail_from: str = DEFAULT_MAIL_FROM
    support_email: str = DEFAULT_SUPPORT_EMAIL

    @property
    def reset_ttl(self) -> timedelta:
        return self.otp_ttl * self.reset_ttl_multiplier

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> AuthSettings:
        """
        Build settings from a Flask config mapping.

        :param config: Loaded configuration (see :mod:`authcore.core.config`).
        :returns: Frozen settings.
        :rtype: AuthSettings
        """
        return cls(
            access_secret=str(config["ACCESS_TOKEN_SECRET"]),
            refresh_secret=str(config["REFRESH_TOKEN_SECRET"]),
            access_ttl=timedelta(minutes=int(config.get("ACCESS_TOKEN_TTL_MINUTES", 15))),
            refresh_ttl=timedelta(days=int(config.get("REFRESH_TOKEN_TTL_DAYS", 7))),
            otp_ttl=timedelta(minutes=int(config.get("OTP_TTL_MINUTES", 10))),
            otp_length=int(config.get("OTP_LENGTH", 8)),
            frontend_url=str(config.get("FRONTEND_URL", DEFAULT_FRONTEND_URL)).rstrip("/"),
            mail_from=str(config.get("MAIL_FROM", DEFAULT_MAIL_FROM)),
            support_email=str(config.get("SUPPORT_EMAIL", DEFAULT_SUPPORT_EMAIL)),
        )
