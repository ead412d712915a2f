"""Tests for environment-driven configuration."""

from warranty_claims.config import settings


def test_defaults(monkeypatch):
    for key in (
        "WARRANTY_DEFAULT_LANGUAGE", "WARRANTY_ADMIN_TOKEN", "EMAIL_BACKEND",
        "SMTP_HOST", "SMTP_PORT", "SMTP_USE_TLS", "DISPATCH_MAX_WORKERS",
    ):
        monkeypatch.delenv(key, raising=False)
    assert settings.get_default_language() == "en"
    assert settings.get_admin_token() is None
    assert settings.get_email_backend() == "log"
    smtp = settings.get_smtp_config()
    assert smtp["host"] == "localhost"
    assert smtp["port"] == 587
    assert smtp["use_tls"] is True
    assert settings.get_dispatch_config() == {"max_workers": 4}


def test_db_path_follows_env(temp_db):
    assert settings.get_db_path() == temp_db


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("WARRANTY_DEFAULT_LANGUAGE", " de ")
    monkeypatch.setenv("WARRANTY_ADMIN_TOKEN", "s3cret")
    monkeypatch.setenv("EMAIL_BACKEND", "SMTP")
    monkeypatch.setenv("SMTP_PORT", "2525")
    monkeypatch.setenv("SMTP_USE_TLS", "no")
    monkeypatch.setenv("DISPATCH_MAX_WORKERS", "8")
    assert settings.get_default_language() == "de"
    assert settings.get_admin_token() == "s3cret"
    assert settings.get_email_backend() == "smtp"
    assert settings.get_smtp_config()["port"] == 2525
    assert settings.get_smtp_config()["use_tls"] is False
    assert settings.get_dispatch_config()["max_workers"] == 8


def test_malformed_values_fall_back(monkeypatch):
    monkeypatch.setenv("SMTP_PORT", "not-a-port")
    monkeypatch.setenv("DISPATCH_MAX_WORKERS", "0")
    monkeypatch.setenv("WARRANTY_ADMIN_TOKEN", "   ")
    assert settings.get_smtp_config()["port"] == 587
    assert settings.get_dispatch_config()["max_workers"] == 1
    assert settings.get_admin_token() is None
