"""Tests for environment-driven settings."""

from __future__ import annotations

from hmi.core.config.settings import Settings, get_settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("HMI_TIMEZONE", raising=False)
    monkeypatch.delenv("DEFAULT_TIME_RANGE_DAYS", raising=False)
    settings = Settings(_env_file=None)
    assert settings.hmi_host == "127.0.0.1"
    assert settings.hmi_port == 8001
    assert settings.hmi_allow_insecure_bind is False
    assert settings.hmi_timezone == "UTC"
    assert settings.default_time_range_days == 30


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("HMI_PORT", "9100")
    monkeypatch.setenv("HMI_TIMEZONE", "America/Chicago")
    monkeypatch.setenv("DEFAULT_TIME_RANGE_DAYS", "90")
    settings = get_settings()
    assert settings.hmi_port == 9100
    assert settings.hmi_timezone == "America/Chicago"
    assert settings.default_time_range_days == 90
