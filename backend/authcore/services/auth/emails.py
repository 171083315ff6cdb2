"""Rendering of the transactional emails sent by the auth flows."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlencode

from jinja2 import Environment, PackageLoader, select_autoescape

from authcore.services._shared.ports import UserRecord
from authcore.services.auth.dto import AuthSettings

ACTIVATION_SUBJECT = "Activate Your Account"
RESET_SUBJECT = "Reset Your Password"


@dataclass(frozen=True, slots=True)
class RenderedEmail:
    subject: str
    html_body: str


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(
        loader=PackageLoader("authcore", "templates/email"),
        autoescape=select_autoescape(["html"]),
    )


def _greeting_name(user: UserRecord) -> str:
    return user.first_name or user.display_name


def _minutes(seconds: float) -> int:
    return int(seconds // 60)


def activation_link(settings: AuthSettings, email: str, otp: str) -> str:
    """Return ``<frontend>/activate?email=..&otp=..`` with encoded query values."""
    return f"{settings.frontend_url}/activate?{urlencode({'email': email, 'otp': otp})}"


def reset_link(settings: AuthSettings, token: str) -> str:
    """Return ``<frontend>/reset-password?token=..``."""
    return f"{settings.frontend_url}/reset-password?{urlencode({'token': token})}"


def render_activation(settings: AuthSettings, user: UserRecord, otp: str) -> RenderedEmail:
    """
    Render the account activation email.

    :param settings: Auth settings (frontend URL, OTP TTL, support contact).
    :param user: Recipient.
    :param otp: Verification code embedded in the body and the link.
    :returns: Subject and HTML body.
    """
    body = (
        _environment()
        .get_template("activate.html")
        .render(
            name=_greeting_name(user),
            otp=otp,
            expiry_minutes=_minutes(settings.otp_ttl.total_seconds()),
            link=activation_link(settings, user.email, otp),
            support_email=settings.support_email,
        )
    )
    return RenderedEmail(subject=ACTIVATION_SUBJECT, html_body=body)


def render_password_reset(settings: AuthSettings, user: UserRecord, token: str) -> RenderedEmail:
    """
    Render the password reset email.

    :param settings: Auth settings (frontend URL, reset TTL, support contact).
    :param user: Recipient.
    :param token: Reset token embedded in the link.
    :returns: Subject and HTML body.
    """
    body = (
        _environment()
        .get_template("reset_password.html")
        .render(
            name=_greeting_name(user),
            expiry_minutes=_minutes(settings.reset_ttl.total_seconds()),
            link=reset_link(settings, token),
            support_email=settings.support_email,
        )
    )
    return RenderedEmail(subject=RESET_SUBJECT, html_body=body)
