"""Environment-driven settings for the auth service.

One class per deployment flavour; ``APP_ENV`` picks which one
:func:`get_config` hands to :meth:`flask.Config.from_object`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

ENV_VAR: Final[str] = "APP_ENV"

PLACEHOLDER_SECRETS: Final[frozenset[str]] = frozenset(
    {"CHANGE_ME", "CHANGE_ME_ACCESS", "CHANGE_ME_REFRESH"}
)

_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "y", "on"})

# .env is optional; real environment variables win
load_dotenv(override=False)


def _raw(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def env_bool(name: str, default: bool = False) -> bool:
    """``True`` for ``1/true/yes/y/on`` (any case), ``default`` when unset."""
    value = _raw(name)
    return default if value is None else value.lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    """Integer value of ``name``.

    :param name: environment variable.
    :param default: returned when the variable is unset or blank.
    :raises ValueError: the variable is set but is not an integer.
    """
    value = _raw(name)
    return default if value is None else int(value)


def env_float(name: str, default: float) -> float:
    value = _raw(name)
    return default if value is None else float(value)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret. Not used for tokens.
    ACCESS_TOKEN_SECRET: str
        HS256 key for access tokens.
    REFRESH_TOKEN_SECRET: str
        HS256 key for refresh tokens. Must differ from the access secret so a
        leaked access secret cannot mint refresh tokens.
    ACCESS_TOKEN_TTL_MINUTES: int
        Access token lifetime.
    REFRESH_TOKEN_TTL_DAYS: int
        Refresh token lifetime; also the TTL of the session entry.
    OTP_TTL_MINUTES: int
        Verification code lifetime. Reset tokens live twice as long.
    OTP_LENGTH: int
        Number of digits in a verification code.
    BCRYPT_ROUNDS: int
        bcrypt work factor.
    FRONTEND_URL: str
        Base URL used to build activation and reset links.
    MAIL_FROM: str
        Sender address of transactional email.
    SUPPORT_EMAIL: str
        Contact shown in email footers.
    MAIL_BACKEND: str
        ``smtp`` | ``log`` | ``memory``.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    REDIS_URL: str | None
        Key-value store URL. When unset, in-memory stores are used.
    REDIS_SOCKET_TIMEOUT: float
        Seconds allowed for Redis connects and commands.
    REFRESH_COOKIE_NAME: str
        Cookie carrying the refresh token.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "CHANGE_ME_ACCESS")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "CHANGE_ME_REFRESH")

    # Lifetimes
    ACCESS_TOKEN_TTL_MINUTES = env_int("ACCESS_TOKEN_TTL_MINUTES", 15)
    REFRESH_TOKEN_TTL_DAYS = env_int("REFRESH_TOKEN_TTL_DAYS", 7)
    OTP_TTL_MINUTES = env_int("OTP_TTL_MINUTES", 10)
    OTP_LENGTH = env_int("OTP_LENGTH", 8)
    BCRYPT_ROUNDS = env_int("BCRYPT_ROUNDS", 12)

    # Links & mail
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
    MAIL_FROM = os.getenv("MAIL_FROM", "no-reply@localhost")
    SUPPORT_EMAIL = os.getenv("SUPPORT_EMAIL", "support@localhost")
    MAIL_BACKEND = os.getenv("MAIL_BACKEND", "log")
    SMTP_HOST = os.getenv("SMTP_HOST", "localhost")
    SMTP_PORT = env_int("SMTP_PORT", 587)
    SMTP_USERNAME = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
    SMTP_USE_TLS = env_bool("SMTP_USE_TLS", True)

    # Storage
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    REDIS_URL = os.getenv("REDIS_URL")
    REDIS_SOCKET_TIMEOUT = env_float("REDIS_SOCKET_TIMEOUT", 2.0)

    # Cookies
    REFRESH_COOKIE_NAME = "refresh_token"
    REFRESH_COOKIE_SECURE = False

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default, so infrastructure error messages are shown
    to clients.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Never talks to Redis or SMTP: in-memory stores and an in-memory outbox.
    - Lowers the bcrypt work factor to keep the suite fast.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    REDIS_URL = None
    MAIL_BACKEND = "memory"
    BCRYPT_ROUNDS = 4
    ACCESS_TOKEN_SECRET = "test-access-secret-0123456789abcdef0123"
    REFRESH_TOKEN_SECRET = "test-refresh-secret-0123456789abcdef012"
    PROPAGATE_EXCEPTIONS = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled and marks the refresh cookie
    ``Secure``. :func:`validate_config` refuses placeholder secrets.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    MAIL_BACKEND = os.getenv("MAIL_BACKEND", "smtp")
    REFRESH_COOKIE_SECURE = True


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config(name: str | None = None) -> type[BaseConfig]:
    """Config class for ``name``, or for ``APP_ENV`` when ``name`` is omitted.

    Unknown or missing names resolve to :class:`DevelopmentConfig`.
    """
    key = (name if name is not None else os.getenv(ENV_VAR, "")).strip().lower()
    return CONFIG_MAP.get(key, DevelopmentConfig)


def validate_config(config: Mapping[str, object]) -> None:
    """Reject unsafe production settings (skipped under debug/testing).

    Parameters
    ----------
    config: Mapping[str, object]
        Loaded Flask configuration.

    Raises
    ------
    RuntimeError
        When a token secret is a placeholder, both token kinds share a
        secret, or ``REDIS_URL`` is unset (sessions and one-time codes would
        be split across worker processes).
    """
    if config.get("DEBUG") or config.get("TESTING"):
        return
    access = config.get("ACCESS_TOKEN_SECRET")
    refresh = config.get("REFRESH_TOKEN_SECRET")
    if access in PLACEHOLDER_SECRETS or refresh in PLACEHOLDER_SECRETS:
        raise RuntimeError("ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET must be set.")
    if access == refresh:
        raise RuntimeError("Access and refresh tokens must use distinct secrets.")
    if not config.get("REDIS_URL"):
        raise RuntimeError("REDIS_URL must be set outside development and testing.")
