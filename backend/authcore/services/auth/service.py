# authcore/services/auth/service.py
from __future__ import annotations

import hmac
import logging
from collections.abc import Callable
from datetime import UTC, datetime

from authcore.services._shared.errors import (
    AlreadyExistsError,
    InvalidInputError,
    NotFoundError,
    StoreUnavailableError,
    UnauthorizedError,
)
from authcore.services._shared.keys import KeyNamespace
from authcore.services._shared.ports import (
    Mailer,
    OneTimeCodeStore,
    PasswordHasher,
    SessionRegistry,
    TokenIssuer,
    TokenKind,
    UserRecord,
    UserRepository,
)
from authcore.services.auth import emails
from authcore.services.auth.codes import generate_otp, generate_reset_token
from authcore.services.auth.dto import (
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

logger = logging.getLogger(__name__)

REGISTERED_MESSAGE = "User created successfully. Please check your email to verify your account."
VERIFICATION_SENT_MESSAGE = "Verification email sent successfully"
RESET_SENT_MESSAGE = "Password reset email sent successfully"
RESET_DONE_MESSAGE = "Password reset successfully. Please login with your new password."
LOGGED_OUT_MESSAGE = "Logged out successfully"

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_RESET_TOKEN = "Invalid or expired reset token"


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _normalize_display_name(display_name: str) -> str:
    return display_name.strip()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AuthService:
    """
    Account authentication and session lifecycle.

    The service owns the eight auth flows (register, verify email, resend
    verification, login, refresh, forgot password, reset password, logout)
    and talks to its collaborators only through ports.

    Sessions
    --------
    - At most one refresh token per user is valid: the one stored in the
      :class:`SessionRegistry`. ``refresh`` rotates it; reuse of a rotated
      token is rejected.
    - The registry is written **before** any token leaves the service.
    - ``reset_password`` deletes the session (logout everywhere).

    Codes
    -----
    Verification codes and reset tokens are consumed destructively, so each
    one can be used at most once.
    """

    def __init__(
        self,
        *,
        users: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
        sessions: SessionRegistry,
        codes: OneTimeCodeStore,
        mailer: Mailer,
        settings: AuthSettings,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """
        Initialize the service with its collaborators.

        :param users: User record repository.
        :param hasher: Password hasher.
        :param tokens: Token issuer/validator.
        :param sessions: Refresh-session registry.
        :param codes: One-time code store (verification codes, reset tokens).
        :param mailer: Transactional mail port.
        :param settings: Immutable secrets, lifetimes and URLs.
        :param clock: Source of "now" for verification timestamps.
        """
        self.users = users
        self.hasher = hasher
        self.tokens = tokens
        self.sessions = sessions
        self.codes = codes
        self.mailer = mailer
        self.settings = settings
        self._clock = clock

    # ------------------------------------------------------------------ #
    # Registration and verification
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> MessageOut:
        """
        Create an unverified account and email its activation code.

        :param dto: Registration input.
        :returns: Confirmation message.
        :raises AlreadyExistsError: If the email or display name is taken.
        """
        email = _normalize_email(dto.email)
        display_name = _normalize_display_name(dto.display_name)
        if not display_name:
            raise InvalidInputError("Display name is required")
        if self.users.get_by_email(email) is not None:
            raise AlreadyExistsError("Email already registered")
        if self.users.get_by_display_name(display_name) is not None:
            raise AlreadyExistsError("Display name already taken")

        user = self.users.create_user(
            email=email,
            password_hash=self.hasher.hash(dto.password),
            display_name=display_name,
            first_name=dto.first_name,
            last_name=dto.last_name,
        )
        self._send_verification(user)
        logger.info("auth.registered", extra={"flow": "register", "user_id": user.id})
        return MessageOut(REGISTERED_MESSAGE)

    def verify_email(self, dto: VerifyEmailIn) -> UserOut:
        """
        Accept an activation code and mark the email as verified.

        Verifying an already verified account is a no-op that returns the
        current user.

        :raises NotFoundError: Unknown user, or the code expired / was never issued.
        :raises InvalidInputError: The code does not match.
        """
        email = _normalize_email(dto.email)
        user = self.users.get_by_email(email)
        if user is None:
            raise NotFoundError("User not found")
        if user.is_verified:
            return UserOut.from_record(user)

        stored = self.codes.consume(KeyNamespace.EMAIL_VERIFICATION, email)
        if stored is None:
            raise NotFoundError("OTP expired or not found")
        if not hmac.compare_digest(stored.encode(), dto.otp.strip().encode()):
            raise InvalidInputError("Invalid OTP")

        updated = self.users.update_user(user.id, email_verified_at=self._clock())
        logger.info("auth.email_verified", extra={"flow": "verify_email", "user_id": user.id})
        return UserOut.from_record(updated)

    def resend_verification(self, dto: ResendVerificationIn) -> MessageOut:
        """
        Issue a fresh activation code, replacing any unconsumed one.

        :raises NotFoundError: Unknown user.
        :raises AlreadyExistsError: The email is already verified.
        """
        user = self.users.get_by_email(_normalize_email(dto.email))
        if user is None:
            raise NotFoundError("User not found")
        if user.is_verified:
            raise AlreadyExistsError("Email already verified")

        self._send_verification(user)
        logger.info(
            "auth.verification_resent",
            extra={"flow": "resend_verification", "user_id": user.id},
        )
        return MessageOut(VERIFICATION_SENT_MESSAGE)

    # ------------------------------------------------------------------ #
    # Sessions
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Authenticate credentials and open a session.

        Unknown email, password-less accounts and wrong passwords share one
        message; an unverified email is reported separately.

        :raises UnauthorizedError: On any credential failure.
        """
        user = self.users.get_by_email(_normalize_email(dto.email))
        if user is None or user.password_hash is None:
            raise UnauthorizedError(INVALID_CREDENTIALS)
        if not self.hasher.verify(dto.password, user.password_hash):
            raise UnauthorizedError(INVALID_CREDENTIALS)
        if not user.is_verified:
            raise UnauthorizedError("Please verify your email before logging in")

        pair = self._open_session(user.id)
        logger.info("auth.login", extra={"flow": "login", "user_id": user.id})
        return LoginOut(user=UserOut.from_record(user), tokens=pair)

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Rotate the refresh token and emit a new pair.

        Security
        --------
        - The token must be a valid, unexpired **refresh** token.
        - It must equal the one stored for its subject. A rotated-away,
          revoked or replayed token fails closed.

        :raises TokenExpiredError: The refresh token has expired.
        :raises InvalidTokenError: Malformed, mis-signed or wrong-kind token.
        :raises UnauthorizedError: No session, or the session holds another token.
        :raises NotFoundError: The user was deleted.
        """
        claims = self.tokens.validate(
            dto.refresh_token,
            self.settings.refresh_secret,
            expected_kind=TokenKind.REFRESH,
        )
        user_id = claims.sub

        current = self.sessions.get(user_id)
        if current is None:
            raise UnauthorizedError("Refresh token not found")
        if not hmac.compare_digest(current.encode(), dto.refresh_token.encode()):
            logger.warning(
                "auth.refresh_mismatch", extra={"flow": "refresh", "user_id": user_id}
            )
            raise UnauthorizedError("Invalid refresh token")

        if self.users.get_by_id(user_id) is None:
            raise NotFoundError("User not found")

        pair = self._open_session(user_id)
        logger.info("auth.refreshed", extra={"flow": "refresh", "user_id": user_id})
        return pair

    def logout(self, dto: LogoutIn) -> MessageOut:
        """
        Close the session carried by the refresh token, if any.

        Never fails: a missing or unusable token is a no-op and an
        unreachable session store is logged and skipped. The caller clears
        its cookie regardless.
        """
        user_id = self.try_decode_refresh(dto.refresh_token)
        if user_id is None:
            logger.info("auth.logout_without_session", extra={"flow": "logout"})
            return MessageOut(LOGGED_OUT_MESSAGE)
        try:
            self.sessions.delete(user_id)
        except StoreUnavailableError:
            # the entry still expires with the refresh token TTL
            logger.warning(
                "auth.logout_session_not_deleted",
                extra={"flow": "logout", "user_id": user_id},
            )
        else:
            logger.info("auth.logout", extra={"flow": "logout", "user_id": user_id})
        return MessageOut(LOGGED_OUT_MESSAGE)

    def try_decode_refresh(self, token: str | None) -> str | None:
        """
        Return the subject of a usable refresh token, else ``None``.

        ``None`` covers a missing, malformed, mis-signed, expired or
        wrong-kind token. Infrastructure errors are not covered.
        """
        if not token:
            return None
        try:
            claims = self.tokens.validate(
                token,
                self.settings.refresh_secret,
                expected_kind=TokenKind.REFRESH,
            )
        except UnauthorizedError:
            return None
        return claims.sub

    # ------------------------------------------------------------------ #
    # Password reset
    # ------------------------------------------------------------------ #

    def forgot_password(self, dto: ForgotPasswordIn) -> MessageOut:
        """
        Issue a single-use reset token and email the reset link.

        :raises NotFoundError: Unknown user.
        """
        email = _normalize_email(dto.email)
        user = self.users.get_by_email(email)
        if user is None:
            raise NotFoundError("User not found")

        token = generate_reset_token()
        self.codes.issue(KeyNamespace.PASSWORD_RESET, email, token, self.settings.reset_ttl)
        rendered = emails.render_password_reset(self.settings, user, token)
        self._send(user.email, rendered)
        logger.info("auth.reset_requested", extra={"flow": "forgot_password", "user_id": user.id})
        return MessageOut(RESET_SENT_MESSAGE)

    def reset_password(self, dto: ResetPasswordIn) -> MessageOut:
        """
        Replace the password and revoke the user's session.

        The stored token is consumed before comparison, so a wrong guess
        also burns the outstanding token.

        :raises NotFoundError: No token for the email, token mismatch, or unknown user.
        :raises UnauthorizedError: The email is not verified.
        """
        email = _normalize_email(dto.email)
        stored = self.codes.consume(KeyNamespace.PASSWORD_RESET, email)
        if stored is None:
            raise NotFoundError(INVALID_RESET_TOKEN)
        if not hmac.compare_digest(stored.encode(), dto.token.strip().encode()):
            raise NotFoundError(INVALID_RESET_TOKEN)

        user = self.users.get_by_email(email)
        if user is None:
            raise NotFoundError("User not found")
        if not user.is_verified:
            raise UnauthorizedError("Please verify your email before resetting password")

        self.users.update_user(user.id, password_hash=self.hasher.hash(dto.new_password))
        self.sessions.delete(user.id)
        logger.info("auth.password_reset", extra={"flow": "reset_password", "user_id": user.id})
        return MessageOut(RESET_DONE_MESSAGE)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _open_session(self, user_id: str) -> TokenPairOut:
        """Issue a pair and register the refresh token before returning it."""
        access = self.tokens.issue(
            user_id, TokenKind.ACCESS, self.settings.access_secret, self.settings.access_ttl
        )
        refresh = self.tokens.issue(
            user_id, TokenKind.REFRESH, self.settings.refresh_secret, self.settings.refresh_ttl
        )
        self.sessions.put(user_id, refresh, self.settings.refresh_ttl)
        return TokenPairOut(access_token=access, refresh_token=refresh)

    def _send_verification(self, user: UserRecord) -> None:
        otp = generate_otp(self.settings.otp_length)
        self.codes.issue(KeyNamespace.EMAIL_VERIFICATION, user.email, otp, self.settings.otp_ttl)
        self._send(user.email, emails.render_activation(self.settings, user, otp))

    def _send(self, recipient: str, rendered: emails.RenderedEmail) -> None:
        self.mailer.send(
            sender=self.settings.mail_from,
            recipient=recipient,
            subject=rendered.subject,
            html_body=rendered.html_body,
        )


__all__ = ["AuthService"]
