"""Tests for config selection and environment parsing."""
from datetime import timedelta

from api.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    _seconds,
    get_config,
)


def test_unset_app_env_selects_production(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)
    assert get_config(None) is ProductionConfig
    assert ProductionConfig.DEBUG is False


def test_unknown_app_env_selects_production(monkeypatch):
    monkeypatch.setenv("APP_ENV", "staging")
    assert get_config(None) is ProductionConfig


def test_development_must_be_asked_for(monkeypatch):
    monkeypatch.setenv("APP_ENV", "dev")
    assert get_config(None) is DevelopmentConfig
    assert get_config("development") is DevelopmentConfig
    assert get_config("testing") is TestingConfig


def test_token_lifetimes_read_from_seconds_variables(monkeypatch):
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRES_SECONDS", "60")
    monkeypatch.delenv("REFRESH_TOKEN_EXPIRES_SECONDS", raising=False)
    assert _seconds("ACCESS_TOKEN_EXPIRES_SECONDS", 86400) == timedelta(seconds=60)
    assert _seconds("REFRESH_TOKEN_EXPIRES_SECONDS", 864000) == timedelta(days=10)
