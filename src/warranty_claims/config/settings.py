"""Centralized configuration from environment variables with defaults."""

import os
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _int(key: str, default: int) -> int:
    raw = os.environ.get(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _bool(key: str, default: bool) -> bool:
    raw = os.environ.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in ("true", "1", "yes")


def _str(key: str, default: str | None) -> str | None:
    raw = os.environ.get(key)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

def get_db_path() -> str:
    """Return path to SQLite database from WARRANTY_DB_PATH env or default data/warranty.db."""
    return os.environ.get("WARRANTY_DB_PATH", "data/warranty.db")


# ---------------------------------------------------------------------------
# Localization
# ---------------------------------------------------------------------------

def get_default_language() -> str:
    """Language used when neither a query parameter nor a header names one."""
    return _str("WARRANTY_DEFAULT_LANGUAGE", "en") or "en"


# ---------------------------------------------------------------------------
# Access
# ---------------------------------------------------------------------------

def get_admin_token() -> str | None:
    """Bearer token identifying admin callers at the HTTP boundary (None disables admin access)."""
    return _str("WARRANTY_ADMIN_TOKEN", None)


# ---------------------------------------------------------------------------
# Email
# ---------------------------------------------------------------------------

def get_email_backend() -> str:
    """Which email sender to build: 'smtp' or 'log' (default)."""
    return (_str("EMAIL_BACKEND", "log") or "log").lower()


def get_smtp_config() -> dict[str, Any]:
    """SMTP connection settings for the status-update mailer."""
    return {
        "host": _str("SMTP_HOST", "localhost"),
        "port": _int("SMTP_PORT", 587),
        "username": _str("SMTP_USERNAME", None),
        "password": _str("SMTP_PASSWORD", None),
        "use_tls": _bool("SMTP_USE_TLS", True),
        "from_address": _str("SMTP_FROM_ADDRESS", "no-reply@warranty.local"),
        "timeout": _int("SMTP_TIMEOUT_SECONDS", 10),
    }


# ---------------------------------------------------------------------------
# Notification dispatch
# ---------------------------------------------------------------------------

def get_dispatch_config() -> dict[str, Any]:
    """Worker pool sizing for detached notification dispatch."""
    return {
        "max_workers": max(1, _int("DISPATCH_MAX_WORKERS", 4)),
    }
