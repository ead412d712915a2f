"""Logging for claim lifecycle events.

Workflow code logs named events (``status_changed``, ``dispatch_failed``...)
through log_claim_event. Each record carries the claim id, the acting caller
when one is known, and the event payload with customer addresses masked.
Output is JSON (WARRANTY_LOG_FORMAT=json) or one human-readable line per event.
"""

import json
import logging
import os
import sys
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

# Payload keys whose values are customer email addresses
REDACTED_FIELDS = frozenset({"recipient", "email"})

_context = threading.local()


def _get_claim_context() -> dict[str, Any]:
    return getattr(_context, "claim_data", {})


def redact_email(address: Any) -> str:
    """Mask an address: "mila.jensen@example.com" -> "m***@example.com". Non-addresses become "***"."""
    text = str(address or "")
    local, sep, domain = text.partition("@")
    if not sep or not local:
        return "***"
    return f"{local[0]}***@{domain}"


def _redact(data: dict[str, Any]) -> dict[str, Any]:
    return {k: redact_email(v) if k in REDACTED_FIELDS else v for k, v in data.items()}


def _record_context(record: logging.LogRecord) -> tuple[str | None, str | None]:
    ctx = _get_claim_context()
    claim_id = getattr(record, "claim_id", None) or ctx.get("claim_id")
    actor = getattr(record, "actor", None) or ctx.get("actor")
    return claim_id, actor


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        claim_id, actor = _record_context(record)
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if claim_id:
            log_data["claim_id"] = claim_id
        if actor:
            log_data["actor"] = actor
        event = getattr(record, "event", None)
        if event:
            log_data["event"] = event
            log_data["data"] = getattr(record, "event_data", {})
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


class HumanReadableFormatter(logging.Formatter):
    """``2026-10-17 09:00:00 INFO     [claim=CLM-1, actor=admin] name: message``"""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        claim_id, actor = _record_context(record)

        ctx_parts = []
        if claim_id:
            ctx_parts.append(f"claim={claim_id}")
        if actor:
            ctx_parts.append(f"actor={actor}")
        ctx_str = f" [{', '.join(ctx_parts)}]" if ctx_parts else ""

        line = f"{timestamp} {record.levelname:8}{ctx_str} {record.name}: {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def get_logger(name: str, structured: bool | None = None) -> logging.Logger:
    """Return the named logger, attaching a stderr handler on first use.

    structured=None reads WARRANTY_LOG_FORMAT ("json" or "human", default human).
    The level comes from WARRANTY_LOG_LEVEL (default INFO).
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        if structured is None:
            structured = os.environ.get("WARRANTY_LOG_FORMAT", "human").lower() == "json"

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(StructuredFormatter() if structured else HumanReadableFormatter())
        logger.addHandler(handler)

        log_level = os.environ.get("WARRANTY_LOG_LEVEL", "INFO").upper()
        logger.setLevel(getattr(logging, log_level, logging.INFO))

        # Prevent duplicate logs from propagating to parent handlers
        logger.propagate = False

    return logger


@contextmanager
def claim_context(claim_id: str, actor: str | None = None):
    """Attach claim_id (and actor) to every record logged in this thread within the block."""
    old_context = _get_claim_context()
    _context.claim_data = {"claim_id": claim_id, "actor": actor}
    try:
        yield
    finally:
        _context.claim_data = old_context


def log_claim_event(
    logger: logging.Logger,
    event: str,
    claim_id: str | None = None,
    level: int = logging.INFO,
    **data: Any,
) -> None:
    """Log a named claim event. Email-address fields in data are masked."""
    data = _redact(data)
    message = f"[{event}]"
    if data:
        message += " " + ", ".join(f"{k}={v}" for k, v in data.items())

    extra: dict[str, Any] = {"event": event, "event_data": data}
    if claim_id:
        extra["claim_id"] = claim_id
    if data.get("actor"):
        extra["actor"] = data["actor"]
    logger.log(level, message, extra=extra)
