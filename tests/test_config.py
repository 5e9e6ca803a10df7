"""Tests for environment-driven settings."""

import logging

from taskboard.config import Settings


def test_defaults(monkeypatch):
    for name in ("DATABASE_URL", "API_PREFIX", "CORS_ORIGINS", "PORT", "LOG_LEVEL", "API_URL"):
        monkeypatch.delenv(f"TASKBOARD_{name}", raising=False)
    settings = Settings.from_env()
    assert settings.database_url.startswith("sqlite+aiosqlite://")
    assert settings.api_prefix == ""
    assert settings.port == 5000
    assert settings.log_level == logging.INFO
    assert "http://localhost:5173" in settings.cors_origins


def test_overrides(monkeypatch):
    monkeypatch.setenv("TASKBOARD_DATABASE_URL", "sqlite+aiosqlite:///tmp/x.db")
    monkeypatch.setenv("TASKBOARD_API_PREFIX", "api/")
    monkeypatch.setenv("TASKBOARD_CORS_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("TASKBOARD_PORT", "8080")
    monkeypatch.setenv("TASKBOARD_LOG_LEVEL", "debug")
    monkeypatch.setenv("TASKBOARD_SQL_ECHO", "yes")
    monkeypatch.setenv("TASKBOARD_API_URL", "http://board.local/api/")

    settings = Settings.from_env()

    assert settings.database_url == "sqlite+aiosqlite:///tmp/x.db"
    assert settings.api_prefix == "/api"
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
    assert settings.port == 8080
    assert settings.log_level == logging.DEBUG
    assert settings.sql_echo is True
    assert settings.api_url == "http://board.local/api"


def test_bad_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("TASKBOARD_PORT", "eighty")
    monkeypatch.setenv("TASKBOARD_API_TIMEOUT", "")
    monkeypatch.setenv("TASKBOARD_LOG_LEVEL", "chatty")
    settings = Settings.from_env()
    assert settings.port == 5000
    assert settings.api_timeout == 10.0
    assert settings.log_level == logging.INFO
