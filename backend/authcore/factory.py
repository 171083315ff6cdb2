"""Application factory wiring Flask extensions, blueprints and the auth service."""

from __future__ import annotations

import logging

from flask import Flask

from authcore.core.config import BaseConfig, get_config, validate_config
from authcore.core.logger import configure_logging, init_app as init_logging
from authcore.services._shared.ports import (
    InMemoryMailer,
    InMemoryOneTimeCodeStore,
    InMemorySessionRegistry,
    Mailer,
    OneTimeCodeStore,
    SessionRegistry,
)
from authcore.services.auth.dto import AuthSettings
from authcore.services.auth.service import AuthService

log = logging.getLogger(__name__)


def _build_mailer(app: Flask) -> Mailer:
    backend = str(app.config.get("MAIL_BACKEND", "log")).lower()
    if backend == "memory":
        return InMemoryMailer()
    if backend == "smtp":
        from authcore.infra.mail.smtp_mailer import SmtpMailer

        return SmtpMailer(
            host=app.config["SMTP_HOST"],
            port=int(app.config.get("SMTP_PORT", 587)),
            username=app.config.get("SMTP_USERNAME"),
            password=app.config.get("SMTP_PASSWORD"),
            use_tls=bool(app.config.get("SMTP_USE_TLS", True)),
        )
    if backend == "log":
        from authcore.infra.mail.smtp_mailer import LoggingMailer

        return LoggingMailer()
    raise RuntimeError(f"Unknown MAIL_BACKEND {backend!r}")


def _build_stores(app: Flask) -> tuple[SessionRegistry, OneTimeCodeStore]:
    from authcore.core.extensions import get_redis

    redis_client = get_redis(app)
    if redis_client is None:
        if not app.testing:
            log.warning("REDIS_URL is not set; sessions and codes are kept in process memory.")
        return InMemorySessionRegistry(), InMemoryOneTimeCodeStore()

    from authcore.infra.redis.redis_otp_store import RedisOneTimeCodeStore
    from authcore.infra.redis.redis_session_registry import RedisSessionRegistry

    return RedisSessionRegistry(redis_client), RedisOneTimeCodeStore(redis_client)


def build_auth_service(app: Flask) -> AuthService:
    """Assemble :class:`AuthService` from the application configuration.

    Parameters
    ----------
    app: flask.Flask
        Configured application with extensions already initialized.

    Returns
    -------
    AuthService
        Service bound to SQLAlchemy users, bcrypt, PyJWT, the session and code
        stores, and the configured mailer.
    """
    from authcore.core.extensions import db
    from authcore.infra.jwt.jwt_token_issuer import JWTTokenIssuer
    from authcore.infra.security.bcrypt_hasher import BcryptPasswordHasher
    from authcore.infra.sqlalchemy.user_repository import SQLAlchemyUserRepository

    sessions, codes = _build_stores(app)
    return AuthService(
        users=SQLAlchemyUserRepository(lambda: db.session),
        hasher=BcryptPasswordHasher(rounds=int(app.config.get("BCRYPT_ROUNDS", 12))),
        tokens=JWTTokenIssuer(),
        sessions=sessions,
        codes=codes,
        mailer=_build_mailer(app),
        settings=AuthSettings.from_mapping(app.config),
    )


def create_app(config: str | type[BaseConfig] | object | None = None) -> Flask:
    """Build and configure the Flask application."""

    app = Flask(__name__)

    if config is None or isinstance(config, str):
        config = get_config(config)
    app.config.from_object(config)
    validate_config(app.config)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))
    init_logging(app)

    from authcore.core import extensions

    extensions.init_app(app)

    app.extensions["auth_service"] = build_auth_service(app)

    from authcore.api import init_app as init_api

    init_api(app)

    from authcore.core import errors

    errors.init_app(app)

    return app
