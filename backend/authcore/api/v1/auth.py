"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, Response, current_app, request

from authcore.api.deps import get_auth_service, json_body, json_response, timing
from authcore.schemas import (
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
from authcore.services._shared.errors import UnauthorizedError
from authcore.services.auth.dto import (
    ForgotPasswordIn,
    LoginIn,
    LogoutIn,
    MessageOut,
    RefreshIn,
    RegisterIn,
    ResendVerificationIn,
    ResetPasswordIn,
    VerifyEmailIn,
)

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
verify_schema = VerifyEmailSchema()
email_schema = EmailOnlySchema()
login_schema = LoginSchema()
reset_schema = ResetPasswordSchema()
user_schema = UserSchema()
login_response_schema = LoginResponseSchema()
token_schema = TokenResponseSchema()
message_schema = MessageSchema()


def _cookie_name() -> str:
    return str(current_app.config.get("REFRESH_COOKIE_NAME", "refresh_token"))


def _set_refresh_cookie(response: Response, token: str) -> None:
    settings = get_auth_service().settings
    response.set_cookie(
        _cookie_name(),
        token,
        max_age=int(settings.refresh_ttl.total_seconds()),
        path="/",
        secure=bool(current_app.config.get("REFRESH_COOKIE_SECURE", False)),
        httponly=True,
        samesite="Strict",
    )


def _clear_refresh_cookie(response: Response) -> None:
    response.set_cookie(
        _cookie_name(),
        "",
        max_age=0,
        expires=0,
        path="/",
        secure=bool(current_app.config.get("REFRESH_COOKIE_SECURE", False)),
        httponly=True,
        samesite="Strict",
    )


def _message(result: MessageOut, status: int = 200) -> Response:
    return json_response(message_schema.dump(result), status=status)


@bp.post("/register")
@timing
def register():
    """Create an unverified account and send the activation email."""

    data = register_schema.load(json_body())
    result = get_auth_service().register(RegisterIn(**data))
    return _message(result, status=201)


@bp.post("/verify-email")
@timing
def verify_email():
    """Accept an activation code and return the verified user."""

    data = verify_schema.load(json_body())
    user = get_auth_service().verify_email(VerifyEmailIn(**data))
    return json_response({"message": "Email verified successfully", "user": user_schema.dump(user)})


@bp.post("/resend-verification")
@timing
def resend_verification():
    """Send a fresh activation code."""

    data = email_schema.load(json_body())
    return _message(get_auth_service().resend_verification(ResendVerificationIn(**data)))


@bp.post("/login")
@timing
def login():
    """Authenticate credentials, return the access token and set the refresh cookie."""

    data = login_schema.load(json_body())
    result = get_auth_service().login(LoginIn(**data))
    body = login_response_schema.dump(
        {
            "message": "Login successful",
            "access_token": result.tokens.access_token,
            "user": result.user,
        }
    )
    response = json_response(body)
    _set_refresh_cookie(response, result.tokens.refresh_token)
    return response


@bp.post("/refresh")
@timing
def refresh():
    """Rotate the refresh cookie and return a new access token."""

    token = request.cookies.get(_cookie_name())
    if not token:
        raise UnauthorizedError("No refresh token found")
    pair = get_auth_service().refresh(RefreshIn(refresh_token=token))
    response = json_response(token_schema.dump({"access_token": pair.access_token}))
    _set_refresh_cookie(response, pair.refresh_token)
    return response


@bp.post("/forgot-password")
@timing
def forgot_password():
    """Email a password reset link."""

    data = email_schema.load(json_body())
    return _message(get_auth_service().forgot_password(ForgotPasswordIn(**data)))


@bp.post("/reset-password")
@timing
def reset_password():
    """Replace the password using an emailed reset token."""

    data = reset_schema.load(json_body())
    return _message(get_auth_service().reset_password(ResetPasswordIn(**data)))


@bp.post("/logout")
@timing
def logout():
    """Close the session, if any, and always expire the refresh cookie."""

    token = request.cookies.get(_cookie_name())
    response = _message(get_auth_service().logout(LogoutIn(refresh_token=token)))
    _clear_refresh_cookie(response)
    return response
