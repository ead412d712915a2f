"""Pydantic models for claims and brands."""

from warranty_claims.models.claim import (
    Brand,
    BrandView,
    Claim,
    ClaimInput,
    ClaimStatus,
    LocalizedNotification,
    StatusUpdate,
)

__all__ = [
    "Brand",
    "BrandView",
    "Claim",
    "ClaimInput",
    "ClaimStatus",
    "LocalizedNotification",
    "StatusUpdate",
]
