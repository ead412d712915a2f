"""Claim lifecycle: access checks, queries, status transitions, notice resolution and dispatch."""

from warranty_claims.workflow.access import (
    AdminCaller,
    AnonymousCaller,
    AnonymousSessionStore,
    Caller,
    ClaimAccessGate,
)
from warranty_claims.workflow.dispatch import NotificationDispatchCoordinator
from warranty_claims.workflow.localization import (
    LocalizedNotificationResolver,
    negotiate_language,
)
from warranty_claims.workflow.queries import ClaimQueryEngine
from warranty_claims.workflow.service import ClaimService
from warranty_claims.workflow.status_machine import ClaimStatusMachine, parse_status

__all__ = [
    "AdminCaller",
    "AnonymousCaller",
    "AnonymousSessionStore",
    "Caller",
    "ClaimAccessGate",
    "ClaimQueryEngine",
    "ClaimService",
    "ClaimStatusMachine",
    "LocalizedNotificationResolver",
    "NotificationDispatchCoordinator",
    "negotiate_language",
    "parse_status",
]
