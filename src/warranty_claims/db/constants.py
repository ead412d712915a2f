"""Literals stored in claim and notification rows."""

from warranty_claims.models.claim import ClaimStatus

STATUS_PENDING = ClaimStatus.PENDING.value

# notification_log.outcome
NOTIFICATION_SENT = "sent"
NOTIFICATION_FAILED = "failed"
