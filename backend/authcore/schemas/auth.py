"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, ValidationError, fields, validate

from authcore.services._shared.ports import MAX_PASSWORD_BYTES, password_fits

_EMAIL = {"required": True, "validate": validate.Length(max=254)}


def _within_hash_limit(value: str) -> None:
    if not password_fits(value):
        raise ValidationError(f"Must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded.")


def _display_name(value: str) -> None:
    if not 3 <= len(value.strip()) <= 50:
        raise ValidationError("Length must be between 3 and 50.")


_NEW_PASSWORD = [validate.Length(min=8), _within_hash_limit]


class RegisterSchema(Schema):
    """Input payload for account registration."""

    email = fields.Email(**_EMAIL)
    display_name = fields.String(required=True, validate=_display_name)
    password = fields.String(required=True, validate=_NEW_PASSWORD)
    first_name = fields.String(load_default=None, validate=validate.Length(max=50))
    last_name = fields.String(load_default=None, validate=validate.Length(max=50))


class VerifyEmailSchema(Schema):
    """Input payload carrying the activation code."""

    email = fields.Email(**_EMAIL)
    otp = fields.String(required=True, validate=validate.Length(min=1, max=32))


class EmailOnlySchema(Schema):
    """Input payload for resend-verification and forgot-password."""

    email = fields.Email(**_EMAIL)


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    email = fields.Email(**_EMAIL)
    password = fields.String(
        required=True, validate=[validate.Length(min=1), _within_hash_limit]
    )


class ResetPasswordSchema(Schema):
    """Input payload for completing a password reset."""

    email = fields.Email(**_EMAIL)
    token = fields.String(required=True, validate=validate.Length(min=1, max=128))
    new_password = fields.String(required=True, validate=_NEW_PASSWORD)


class UserSchema(Schema):
    """Public representation of a user."""

    id = fields.String(required=True)
    email = fields.Email(required=True)
    display_name = fields.String(required=True)
    first_name = fields.String(allow_none=True)
    last_name = fields.String(allow_none=True)
    bio = fields.String(allow_none=True)
    avatar_url = fields.String(allow_none=True)
    is_verified = fields.Boolean()
    email_verified_at = fields.DateTime(allow_none=True)
    created_at = fields.DateTime(required=True)


class LoginResponseSchema(Schema):
    """Response payload for a successful login. The refresh token travels as a cookie."""

    message = fields.String()
    access_token = fields.String(required=True)
    token_type = fields.String(dump_default="bearer")
    user = fields.Nested(UserSchema)


class TokenResponseSchema(Schema):
    """Response payload containing a rotated access token."""

    access_token = fields.String(required=True)
    token_type = fields.String(dump_default="bearer")


class MessageSchema(Schema):
    message = fields.String(required=True)
