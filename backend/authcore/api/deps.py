"""Request-scoped helpers shared by the v1 handlers."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request

from authcore.services.auth.service import AuthService

F = TypeVar("F", bound=Callable[..., Any])

AUTH_SERVICE_KEY = "auth_service"


def get_auth_service() -> AuthService:
    """The :class:`AuthService` that :func:`authcore.create_app` attached."""
    try:
        return current_app.extensions[AUTH_SERVICE_KEY]
    except KeyError:
        raise RuntimeError("No auth service on this app; build it with create_app().") from None


def json_body() -> dict[str, Any]:
    """Request body as a JSON object.

    Anything else (no body, invalid JSON, a list) yields ``{}`` so that schema
    validation reports the missing fields as a 422.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return {}
    return payload


def json_response(payload: Any, *, status: int = 200) -> Response:
    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Log how long the wrapped view took, at DEBUG, as ``elapsed_ms``."""

    @functools.wraps(func)
    def timed(*args: Any, **kwargs: Any) -> Any:
        started = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            current_app.logger.debug(
                "view timing",
                extra={
                    "endpoint": request.endpoint,
                    "elapsed_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )

    return timed  # type: ignore[return-value]
