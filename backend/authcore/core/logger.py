"""JSON logging for the auth service, correlated by request id.

Records are written one JSON object per line to stdout. Only a fixed set of
``extra=`` keys is copied into the payload, so arbitrary attributes attached
by callers (a stray ``password=`` for instance) never reach the log stream.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, Response, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
INBOUND_ID_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")

# Inbound ids are echoed back in a header, so keep them short and printable.
_SAFE_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")

EXTRA_KEYS = ("flow", "user_id", "endpoint", "elapsed_ms")

_HANDLER_MARK = "_authcore_json"


class JSONFormatter(logging.Formatter):
    """One-line JSON rendering of a :class:`logging.LogRecord`."""

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            "time": stamp.isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        payload.update(
            {key: getattr(record, key) for key in EXTRA_KEYS if hasattr(record, key)}
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp ``request_id`` on every record (``None`` outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


def _inbound_request_id() -> str | None:
    for header in INBOUND_ID_HEADERS:
        value = (request.headers.get(header) or "").strip()
        if value and _SAFE_ID.match(value):
            return value
    return None


def ensure_request_id() -> str:
    """Return the id of the current request.

    The id is taken from ``X-Request-ID`` / ``X-Correlation-ID`` when the
    caller supplies a well-formed one, generated otherwise, and memoised on
    :data:`flask.g`. Outside a request a throwaway UUID is returned.
    """
    if not has_request_context():
        return str(uuid4())
    current = g.get("request_id")
    if current is None:
        current = _inbound_request_id() or str(uuid4())
        g.request_id = current
    return current


def _coerce_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: str | int = "INFO") -> logging.Handler:
    """Install the JSON stdout handler on the root logger.

    :param level: level name (``"DEBUG"``) or number; unknown names fall back
        to ``INFO``.
    :returns: the installed handler. Calling again replaces the handler this
        function installed earlier and leaves any other root handler alone.
    """
    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, _HANDLER_MARK, False):
            root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())
    setattr(handler, _HANDLER_MARK, True)

    root.addHandler(handler)
    root.setLevel(_coerce_level(level))
    return handler


def init_app(app: Flask) -> None:
    """Seed a request id before each request and echo it on the response."""

    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _bind_request_id() -> None:
        ensure_request_id()

    @app.after_request
    def _echo_request_id(response: Response) -> Response:
        response.headers[REQUEST_ID_HEADER] = ensure_request_id()
        return response


__all__ = [
    "JSONFormatter",
    "RequestIdFilter",
    "configure_logging",
    "ensure_request_id",
    "init_app",
]
