"""Factory Boy helpers wired to the project's SQLAlchemy session."""

from __future__ import annotations

import factory
from authcore.core.extensions import db


def _session():
    """Return the Flask-SQLAlchemy scoped session of the active app context."""
    return db.session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Base class configuring Factory Boy for the application session."""

    class Meta:
        abstract = True
        # A callable keeps Factory Boy lazy so it picks up the per-test app.
        sqlalchemy_session_factory = _session
        sqlalchemy_session_persistence = "commit"
