"""Outbound email for claim status changes."""

from warranty_claims.notifications.mailer import (
    EmailSender,
    LoggingEmailSender,
    SmtpEmailSender,
    build_email_sender,
)

__all__ = [
    "EmailSender",
    "LoggingEmailSender",
    "SmtpEmailSender",
    "build_email_sender",
]
