"""Pydantic models for warranty claims, brands and their localized notices.

Field names are snake_case in Python and camelCase on the wire
(``orderNumber``, ``submissionDate``...), matching the JSON the web client reads.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from warranty_claims.utils.sanitization import MAX_EMAIL, MAX_ORDER_NUMBER

ADDRESS_NOT_PROVIDED = "Address not provided"


class ClaimStatus(str, Enum):
    """Workflow states of a claim. Values are the wire representation."""

    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    REJECTED = "Rejected"


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ClaimInput(_WireModel):
    """Fields needed to store a new claim (used by seeding and tests)."""

    order_number: str = Field(
        ..., min_length=1, max_length=MAX_ORDER_NUMBER, description="Customer-supplied order number"
    )
    email: str = Field(..., min_length=1, max_length=MAX_EMAIL, description="Customer email address")
    name: str = Field(..., description="Customer name")
    street: Optional[str] = Field(default=None)
    postal_code: Optional[str] = Field(default=None)
    city: Optional[str] = Field(default=None)
    phone_number: str = Field(default="")
    brand: str = Field(..., description="Brand name the claim is filed against")
    problem_description: str = Field(default="")
    submission_date: Optional[datetime] = Field(
        default=None, description="Defaults to now when stored"
    )


class Claim(_WireModel):
    """One stored warranty claim."""

    id: str
    order_number: str
    email: str
    name: str
    street: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    phone_number: str = ""
    brand: str
    problem_description: str = ""
    status: ClaimStatus = ClaimStatus.PENDING
    submission_date: datetime

    @property
    def has_address(self) -> bool:
        """An address counts as provided only when street, postal code and city are all set."""
        return bool(self.street and self.postal_code and self.city)

    @computed_field
    @property
    def formatted_address(self) -> str:
        if not self.has_address:
            return ADDRESS_NOT_PROVIDED
        return f"{self.street}, {self.postal_code} {self.city}"


class LocalizedNotification(_WireModel):
    """A brand notice in one language."""

    brand_id: str
    language: str
    content: str


class Brand(_WireModel):
    """A product brand with its default notice and localized variants."""

    id: str
    name: str
    default_notification: str = ""
    notifications: list[LocalizedNotification] = Field(default_factory=list)


class BrandView(_WireModel):
    """Brand as returned to clients, with the notice already resolved for one language."""

    id: str
    name: str
    notification: str = ""


class StatusUpdate(BaseModel):
    """Body of a status-change request. The value is validated by the status machine."""

    status: Any = None
