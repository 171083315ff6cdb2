"""Unit tests for configuration selection and validation."""

from __future__ import annotations

import pytest
from authcore.core.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    env_int,
    get_config,
    validate_config,
)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("production", ProductionConfig),
        ("testing", TestingConfig),
        ("development", DevelopmentConfig),
        ("unknown", DevelopmentConfig),
    ],
)
def test_get_config_follows_app_env(monkeypatch, name, expected) -> None:
    monkeypatch.setenv("APP_ENV", name)

    assert get_config() is expected


def test_defaults_match_documented_lifetimes() -> None:
    assert TestingConfig.ACCESS_TOKEN_TTL_MINUTES == 15
    assert TestingConfig.REFRESH_TOKEN_TTL_DAYS == 7
    assert TestingConfig.OTP_TTL_MINUTES == 10
    assert TestingConfig.OTP_LENGTH == 8
    assert TestingConfig.BCRYPT_ROUNDS == 4
    assert ProductionConfig.REFRESH_COOKIE_SECURE is True


def _prod(**overrides) -> dict:
    config = {
        "DEBUG": False,
        "TESTING": False,
        "ACCESS_TOKEN_SECRET": "a" * 40,
        "REFRESH_TOKEN_SECRET": "r" * 40,
        "REDIS_URL": "redis://cache:6379/0",
    }
    config.update(overrides)
    return config


def test_validate_config_accepts_distinct_real_secrets() -> None:
    validate_config(_prod())


@pytest.mark.parametrize(
    "overrides",
    [
        {"ACCESS_TOKEN_SECRET": "CHANGE_ME_ACCESS"},
        {"REFRESH_TOKEN_SECRET": "CHANGE_ME_REFRESH"},
        {"ACCESS_TOKEN_SECRET": "same" * 10, "REFRESH_TOKEN_SECRET": "same" * 10},
        {"REDIS_URL": None},
        {"REDIS_URL": ""},
    ],
)
def test_validate_config_rejects_unsafe_settings(overrides) -> None:
    with pytest.raises(RuntimeError):
        validate_config(_prod(**overrides))


def test_validate_config_is_lenient_in_testing() -> None:
    validate_config(_prod(TESTING=True, ACCESS_TOKEN_SECRET="CHANGE_ME_ACCESS"))


def test_get_config_by_explicit_name_ignores_app_env(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENV", "production")

    assert get_config("Testing") is TestingConfig


def test_env_helpers_treat_blank_as_unset(monkeypatch) -> None:
    monkeypatch.setenv("AUTHCORE_FLAG", "  ")
    monkeypatch.setenv("AUTHCORE_NUM", "")

    assert env_bool("AUTHCORE_FLAG", True) is True
    assert env_int("AUTHCORE_NUM", 7) == 7


def test_env_int_rejects_garbage(monkeypatch) -> None:
    monkeypatch.setenv("AUTHCORE_NUM", "seven")

    with pytest.raises(ValueError):
        env_int("AUTHCORE_NUM", 7)


def test_development_may_run_without_redis() -> None:
    validate_config(_prod(DEBUG=True, REDIS_URL=None))


def test_production_without_redis_refuses_to_start() -> None:
    with pytest.raises(RuntimeError, match="REDIS_URL"):
        validate_config(_prod(REDIS_URL=None))
