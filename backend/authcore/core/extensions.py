"""Shared extension objects: the SQLAlchemy handle and the Redis client."""

from __future__ import annotations

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

REDIS_EXTENSION_KEY = "redis_client"

# Deterministic constraint names keep DDL diffs stable across backends.
metadata = MetaData(
    naming_convention={
        "pk": "pk_%(table_name)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ix": "ix_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
    }
)

db: SQLAlchemy = SQLAlchemy(metadata=metadata, session_options={"autoflush": False})


def connect_redis(url: str, *, socket_timeout: float = 2.0) -> redis.Redis:
    """Open a Redis client for ``url`` and check it answers ``PING``.

    Parameters
    ----------
    url:
        ``redis://`` or ``rediss://`` URL.
    socket_timeout:
        Seconds allowed for connect and for each command.

    Raises
    ------
    RuntimeError
        The server is unreachable at start-up.
    """
    client = redis.Redis.from_url(
        url,
        socket_timeout=socket_timeout,
        socket_connect_timeout=socket_timeout,
        health_check_interval=30,
    )
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Redis at {url!r} did not answer PING") from exc
    return client


def init_app(app: Flask) -> None:
    """Bind the database handle and, when ``REDIS_URL`` is set, a Redis client.

    The client lives in ``app.extensions["redis_client"]``; the key is absent
    when no URL is configured.
    """
    db.init_app(app)

    # table metadata must be complete before create_all()
    from authcore import models  # noqa: F401

    url = app.config.get("REDIS_URL")
    if url:
        timeout = float(app.config.get("REDIS_SOCKET_TIMEOUT", 2.0))
        app.extensions[REDIS_EXTENSION_KEY] = connect_redis(url, socket_timeout=timeout)
    else:
        app.extensions.pop(REDIS_EXTENSION_KEY, None)


def get_redis(app: Flask | None = None) -> redis.Redis | None:
    """Redis client bound to ``app`` (default: the current app), or ``None``."""
    target = app if app is not None else current_app
    return target.extensions.get(REDIS_EXTENSION_KEY)
