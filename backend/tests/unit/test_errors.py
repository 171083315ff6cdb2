"""Unit tests for the problem+json error layer."""

from __future__ import annotations

from http import HTTPStatus

import pytest
from authcore.core.errors import http_error_code, translate_service_error
from authcore.services._shared.errors import (
    AlreadyExistsError,
    InvalidTokenError,
    MailDeliveryError,
    StoreUnavailableError,
    UnauthorizedError,
)


@pytest.mark.parametrize(
    ("exc", "status"),
    [
        (AlreadyExistsError("Email already registered"), HTTPStatus.CONFLICT),
        (UnauthorizedError("Invalid email or password"), HTTPStatus.UNAUTHORIZED),
        (InvalidTokenError("Invalid token"), HTTPStatus.UNAUTHORIZED),
    ],
)
def test_business_errors_keep_their_message(exc, status) -> None:
    api_err = translate_service_error(exc)

    assert api_err.status_code == status
    assert api_err.message == exc.message
    assert api_err.code == exc.code


def test_infrastructure_detail_is_hidden_unless_exposed() -> None:
    exc = StoreUnavailableError("redis://cache:6379 refused connection")

    hidden = translate_service_error(exc)
    shown = translate_service_error(exc, expose_internal=True)

    assert hidden.status_code == HTTPStatus.SERVICE_UNAVAILABLE
    assert hidden.message == "Service Unavailable"
    assert shown.message == exc.message


def test_mail_failure_is_a_generic_500() -> None:
    api_err = translate_service_error(MailDeliveryError("smtp auth failed for user x"))

    assert api_err.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert "smtp" not in api_err.message


def test_http_error_code() -> None:
    assert http_error_code(404) == "not_found"
    assert http_error_code(405) == "method_not_allowed"
    assert http_error_code(799) == "error"
