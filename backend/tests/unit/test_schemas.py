"""Unit tests for request validation in the auth schemas."""

from __future__ import annotations

import pytest
from authcore.schemas import LoginSchema, RegisterSchema
from marshmallow import ValidationError

VALID = {"email": "a@x.com", "password": "longenough1", "display_name": "alice"}


def test_register_accepts_password_of_exactly_72_bytes() -> None:
    data = RegisterSchema().load({**VALID, "password": "é" * 36})

    assert data["password"] == "é" * 36


@pytest.mark.parametrize("password", ["p" * 73, "é" * 37])
def test_register_rejects_password_over_72_bytes(password) -> None:
    with pytest.raises(ValidationError) as excinfo:
        RegisterSchema().load({**VALID, "password": password})

    assert "password" in excinfo.value.messages


def test_login_rejects_password_over_72_bytes() -> None:
    with pytest.raises(ValidationError) as excinfo:
        LoginSchema().load({"email": "a@x.com", "password": "p" * 73})

    assert "password" in excinfo.value.messages


@pytest.mark.parametrize("display_name", ["   ", " ab ", "x" * 51])
def test_register_display_name_length_ignores_surrounding_spaces(display_name) -> None:
    with pytest.raises(ValidationError) as excinfo:
        RegisterSchema().load({**VALID, "display_name": display_name})

    assert "display_name" in excinfo.value.messages
