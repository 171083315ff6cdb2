"""RFC 7807 ``application/problem+json`` responses for every failure path."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, current_app, jsonify, request
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from authcore.core.logger import ensure_request_id
from authcore.services._shared.errors import InfrastructureError, ServiceError

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"

# Service error code -> HTTP status. Unknown codes are treated as 400.
SERVICE_ERROR_STATUS: dict[str, HTTPStatus] = {
    "invalid_input": HTTPStatus.BAD_REQUEST,
    "bad_request": HTTPStatus.BAD_REQUEST,
    "unauthorized": HTTPStatus.UNAUTHORIZED,
    "invalid_token": HTTPStatus.UNAUTHORIZED,
    "token_expired": HTTPStatus.UNAUTHORIZED,
    "not_found": HTTPStatus.NOT_FOUND,
    "already_exists": HTTPStatus.CONFLICT,
    "internal_server_error": HTTPStatus.INTERNAL_SERVER_ERROR,
    "service_unavailable": HTTPStatus.SERVICE_UNAVAILABLE,
}


def http_error_code(status: int) -> str:
    """Snake-case code for a bare HTTP status, e.g. ``405 -> method_not_allowed``."""
    try:
        return HTTPStatus(status).phrase.lower().replace(" ", "_").replace("-", "_")
    except ValueError:
        return "error"


class APIError(Exception):
    """Error already shaped for the wire.

    Parameters
    ----------
    message : str
        ``detail`` shown to the client.
    status_code : int
        HTTP status. Defaults to ``400``.
    code : str
        Stable machine-readable code.
    details : dict | None
        Extra structured payload, rendered under ``details``.
    """

    def __init__(
        self,
        message: str,
        status_code: int = HTTPStatus.BAD_REQUEST,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details

    def to_problem(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "type": "about:blank",
            "title": HTTPStatus(self.status_code).phrase,
            "status": self.status_code,
            "detail": self.message,
            "instance": request.path,
            "code": self.code,
            "request_id": ensure_request_id(),
        }
        if self.details:
            body["details"] = self.details
        return body

    def to_response(self) -> tuple[Response, int]:
        response = jsonify(self.to_problem())
        response.mimetype = PROBLEM_MIMETYPE
        return response, self.status_code


def translate_service_error(exc: ServiceError, *, expose_internal: bool = False) -> APIError:
    """Map a service-layer error onto an :class:`APIError`.

    :param exc: error raised by :mod:`authcore.services`.
    :param expose_internal: pass infrastructure messages through (debug only).
        Otherwise they are replaced by the status phrase so store or mail
        internals never reach clients.
    """
    status = SERVICE_ERROR_STATUS.get(exc.code, HTTPStatus.BAD_REQUEST)
    if isinstance(exc, InfrastructureError) and not expose_internal:
        return APIError(status.phrase, status, exc.code)
    return APIError(exc.message, status, exc.code)


def _emit(err: APIError, cause: BaseException | None = None) -> tuple[Response, int]:
    if err.status_code >= 500:
        log.error(
            "request failed: code=%s status=%s",
            err.code,
            err.status_code,
            exc_info=cause,
            extra={"endpoint": request.endpoint},
        )
    else:
        log.warning(
            "request rejected: code=%s status=%s detail=%s",
            err.code,
            err.status_code,
            err.message,
            extra={"endpoint": request.endpoint},
        )
    return err.to_response()


def init_app(app: Flask) -> None:
    """Register problem+json handlers on ``app``.

    Every handled error carries the request id; 5xx responses are logged
    with their traceback, 4xx as warnings without one.
    """

    @app.errorhandler(APIError)
    def _api_error(err: APIError):
        return _emit(err)

    @app.errorhandler(ServiceError)
    def _service_error(err: ServiceError):
        api_err = translate_service_error(err, expose_internal=current_app.debug)
        return _emit(api_err, err)

    @app.errorhandler(ValidationError)
    def _validation_error(err: ValidationError):
        api_err = APIError(
            "Validation failed",
            HTTPStatus.UNPROCESSABLE_ENTITY,
            "validation_error",
            {"errors": err.messages},
        )
        return _emit(api_err)

    @app.errorhandler(HTTPException)
    def _http_error(err: HTTPException):
        status = err.code or HTTPStatus.INTERNAL_SERVER_ERROR
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        else:
            message = (err.description or HTTPStatus(status).phrase).strip()
        return _emit(APIError(message, status, http_error_code(status)), err)

    @app.errorhandler(IntegrityError)
    def _integrity_error(err: IntegrityError):
        # unique race on email / display name after the service pre-checks
        return _emit(APIError("Resource conflict", HTTPStatus.CONFLICT, "already_exists"), err)

    @app.errorhandler(OperationalError)
    def _database_down(err: OperationalError):
        api_err = APIError(
            "Service temporarily unavailable",
            HTTPStatus.SERVICE_UNAVAILABLE,
            "service_unavailable",
        )
        return _emit(api_err, err)

    @app.errorhandler(Exception)
    def _unexpected(err: Exception):
        api_err = APIError(
            "Unexpected error",
            HTTPStatus.INTERNAL_SERVER_ERROR,
            "internal_server_error",
        )
        return _emit(api_err, err)


__all__ = ["APIError", "SERVICE_ERROR_STATUS", "init_app", "translate_service_error"]
