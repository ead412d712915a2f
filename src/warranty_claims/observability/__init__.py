"""Logging for claim lifecycle events."""

from warranty_claims.observability.logger import (
    claim_context,
    get_logger,
    log_claim_event,
    redact_email,
)

__all__ = [
    "claim_context",
    "get_logger",
    "log_claim_event",
    "redact_email",
]
