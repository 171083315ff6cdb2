"""Pytest fixtures building an isolated application per test.

Every test gets a fresh Flask app bound to its own in-memory SQLite database,
in-memory session and code stores, and an in-memory mail outbox.
"""

from __future__ import annotations

import os

import pytest
from authcore.core.config import TestingConfig
from authcore.core.extensions import db as _db
from authcore.factory import create_app


class SuiteConfig(TestingConfig):
    """Pinned settings for the suite: links point at a fixed frontend host."""

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    REDIS_URL = None
    MAIL_BACKEND = "memory"
    FRONTEND_URL = "https://app.example.com"
    LOG_LEVEL = "WARNING"


@pytest.fixture()
def app():
    """Create a Flask application configured for testing.

    Yields
    ------
    flask.Flask
        Application with :class:`SuiteConfig` applied, an active app context
        and all tables created.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    application = create_app(SuiteConfig)
    with application.app_context():
        _db.create_all()
        yield application
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def db(app):
    """Database extension bound to the testing application."""
    return _db


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture()
def auth_service(app):
    """The :class:`AuthService` wired by the application factory."""
    return app.extensions["auth_service"]


@pytest.fixture()
def outbox(auth_service):
    """In-memory mailer collecting every email the app sends."""
    return auth_service.mailer


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk
