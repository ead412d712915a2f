"""Claim status state machine: the sole writer of a claim's status."""

import logging
from typing import TYPE_CHECKING, Any

from warranty_claims.db.repository import ClaimRepository
from warranty_claims.models.claim import Claim, ClaimStatus
from warranty_claims.observability import get_logger, log_claim_event
from warranty_claims.utils.errors import InvalidStatusError, InvalidTransitionError

if TYPE_CHECKING:
    from warranty_claims.workflow.dispatch import NotificationDispatchCoordinator

logger = get_logger(__name__)

# Every state may move to every other state. Resolved and Rejected are end
# states for the workflow but admins can reopen them.
ALLOWED_TRANSITIONS: dict[ClaimStatus, frozenset[ClaimStatus]] = {
    status: frozenset(ClaimStatus) for status in ClaimStatus
}


def parse_status(value: Any) -> ClaimStatus:
    """Map a wire value ("Pending", "In Progress", ...) to ClaimStatus.

    Raises InvalidStatusError for anything else, including None and non-strings.
    """
    if isinstance(value, ClaimStatus):
        return value
    if isinstance(value, str):
        try:
            return ClaimStatus(value)
        except ValueError:
            pass
    allowed = ", ".join(s.value for s in ClaimStatus)
    raise InvalidStatusError(f"Invalid status: {value!r}. Expected one of: {allowed}")


class ClaimStatusMachine:
    """Validates and commits claim status transitions, then hands off notification."""

    def __init__(
        self,
        repository: ClaimRepository | None = None,
        dispatcher: "NotificationDispatchCoordinator | None" = None,
        transitions: dict[ClaimStatus, frozenset[ClaimStatus]] | None = None,
    ):
        self._repo = repository or ClaimRepository()
        self._dispatcher = dispatcher
        self._transitions = ALLOWED_TRANSITIONS if transitions is None else transitions

    def sources_for(self, target: ClaimStatus) -> frozenset[str]:
        """Stored status values from which target may be reached."""
        return frozenset(s.value for s, targets in self._transitions.items() if target in targets)

    def transition(self, claim_id: str, new_status: Any, actor: str | None = None) -> Claim:
        """Persist new_status for the claim and return the updated claim.

        The status is validated before the store is touched, so an invalid value
        never mutates anything. The notification is handed off only after the
        store commit returns; its outcome never affects the return value.

        Raises:
            InvalidStatusError: new_status is not a recognized state.
            InvalidTransitionError: the claim's current status may not move to new_status.
            NotFoundError: claim_id does not resolve.
        """
        try:
            status = parse_status(new_status)
        except InvalidStatusError:
            log_claim_event(
                logger,
                "transition_rejected",
                claim_id=claim_id,
                level=logging.WARNING,
                requested_status=new_status,
            )
            raise

        try:
            updated = self._repo.update_claim_status(
                claim_id,
                status.value,
                actor=actor,
                details=f"Status set to {status.value}",
                allowed_from=self.sources_for(status),
            )
        except InvalidTransitionError:
            log_claim_event(
                logger,
                "transition_rejected",
                claim_id=claim_id,
                level=logging.WARNING,
                requested_status=status.value,
            )
            raise
        log_claim_event(logger, "status_changed", claim_id=claim_id, new_status=status.value, actor=actor)

        if self._dispatcher is not None:
            self._dispatcher.submit(updated, status)
        return updated
