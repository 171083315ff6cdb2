"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask, HTTP, or SQLAlchemy directly. They serve as stable contracts between
adapters (stores, repositories, token issuer) and the auth service.

Every error carries a stable machine-readable ``code``. The translation to
HTTP responses (RFC 7807) is handled by ``authcore/core/errors.py``.
"""

from __future__ import annotations

from typing import ClassVar

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from adapters or domain logic.
    - The API layer translates them to ``APIError`` via their ``code``.
    """

    code: ClassVar[str] = "bad_request"
    default_message: ClassVar[str] = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class InfrastructureError(ServiceError):
    """
    Failure of a backing service (hashing, mail, key-value store).

    Messages of these errors are meant for operators; the API layer hides
    them from clients outside of debug mode.
    """

    code = "internal_server_error"
    default_message = "Internal server error"


# --------------------------------------------------------------------------- #
# Business-rule errors (terminal per request)
# --------------------------------------------------------------------------- #


class AlreadyExistsError(ServiceError):
    """Raised when a unique identity (email, display name) is already taken."""

    code = "already_exists"
    default_message = "Resource already exists"


class NotFoundError(ServiceError):
    """Raised when a user, code or reset token cannot be found."""

    code = "not_found"
    default_message = "Resource not found"


class UnauthorizedError(ServiceError):
    """Raised when credentials or a session are not acceptable."""

    code = "unauthorized"
    default_message = "Unauthorized"


class InvalidInputError(ServiceError):
    """Raised when a supplied value is well-formed but wrong (e.g. an OTP)."""

    code = "invalid_input"
    default_message = "Invalid input"


class InvalidTokenError(UnauthorizedError):
    """Raised for malformed, mis-signed or wrong-kind tokens."""

    code = "invalid_token"
    default_message = "Invalid token"


class TokenExpiredError(UnauthorizedError):
    """Raised when a token's embedded expiry lies in the past."""

    code = "token_expired"
    default_message = "Token has expired"


# --------------------------------------------------------------------------- #
# Infrastructure errors
# --------------------------------------------------------------------------- #


class HashingError(InfrastructureError):
    """Raised when the password hasher fails or receives a malformed hash."""

    default_message = "Password hashing failed"


class MailDeliveryError(InfrastructureError):
    """Raised when the mailer could not hand the message to its transport."""

    default_message = "Email delivery failed"


class StoreUnavailableError(InfrastructureError):
    """Raised when the key-value store cannot be reached."""

    code = "service_unavailable"
    default_message = "Key-value store unavailable"
