"""Error taxonomy for the claim lifecycle.

Each error carries the HTTP status it maps to at the API boundary. DispatchError
is only ever logged and recorded; it never reaches the caller of a transition.
"""


class WarrantyClaimError(Exception):
    """Base class for claim lifecycle errors."""

    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message}


class NotFoundError(WarrantyClaimError):
    """Requested claim or brand does not exist."""

    http_status = 404


class InvalidStatusError(WarrantyClaimError):
    """Status value is not one of the recognized claim states."""

    http_status = 400


class ForbiddenError(WarrantyClaimError):
    """Caller lacks the capability for the requested operation."""

    http_status = 403


class DispatchError(WarrantyClaimError):
    """Email collaborator failed to deliver a status notification."""

    http_status = 502


class InvalidQueryError(WarrantyClaimError):
    """Query parameter is malformed (for example an over-long search term)."""

    http_status = 400


class InvalidTransitionError(WarrantyClaimError):
    """Claim's current status may not move to the requested one."""

    http_status = 409
