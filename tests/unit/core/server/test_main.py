"""Tests for the server entry point's startup checks."""

from __future__ import annotations

import pytest

from hmi.core.server import main


@pytest.mark.parametrize(
    "host, expected",
    [
        ("127.0.0.1", True),
        ("::1", True),
        ("localhost", True),
        ("0.0.0.0", False),
        ("192.168.1.20", False),
        ("health.example.com", False),
    ],
)
def test_is_loopback_host(host, expected):
    assert main._is_loopback_host(host) is expected


def test_refuses_non_loopback_bind(monkeypatch):
    monkeypatch.setenv("HMI_HOST", "0.0.0.0")

    def _fail():
        raise AssertionError("server should not be created")

    monkeypatch.setattr(main, "create_app", _fail)
    with pytest.raises(RuntimeError, match="non-loopback"):
        main.run()


def test_insecure_bind_can_be_allowed(monkeypatch):
    monkeypatch.setenv("HMI_HOST", "0.0.0.0")
    monkeypatch.setenv("HMI_ALLOW_INSECURE_BIND", "true")
    calls = {}

    class _Server:
        def run(self, **kwargs):
            calls.update(kwargs)

    monkeypatch.setattr(main, "create_app", _Server)
    main.run()
    assert calls == {"transport": "streamable-http", "host": "0.0.0.0", "port": 8001}


@pytest.mark.parametrize("zone", ["Mars/Olympus_Mons", "../etc/passwd"])
def test_refuses_unknown_timezone(monkeypatch, zone):
    monkeypatch.setenv("HMI_TIMEZONE", zone)

    def _fail():
        raise AssertionError("server should not be created")

    monkeypatch.setattr(main, "create_app", _fail)
    with pytest.raises(RuntimeError, match="Unknown HMI_TIMEZONE"):
        main.run()


def test_refuses_unsupported_default_range(monkeypatch):
    monkeypatch.setenv("DEFAULT_TIME_RANGE_DAYS", "14")

    def _fail():
        raise AssertionError("server should not be created")

    monkeypatch.setattr(main, "create_app", _fail)
    with pytest.raises(RuntimeError, match="DEFAULT_TIME_RANGE_DAYS must be one of"):
        main.run()


def test_startup_logs_timezone_and_range(monkeypatch, caplog):
    monkeypatch.setenv("HMI_TIMEZONE", "America/Chicago")
    monkeypatch.setenv("DEFAULT_TIME_RANGE_DAYS", "90")

    class _Server:
        def run(self, **kwargs):
            pass

    monkeypatch.setattr(main, "create_app", _Server)
    with caplog.at_level("INFO", logger=main.__name__):
        main.run()
    assert "timezone America/Chicago, default range 90 days" in caplog.text
