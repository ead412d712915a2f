"""Status-change notification dispatch.

A committed transition is handed to a worker pool so the email never holds up
(or fails) the request that changed the status. Each hand-off calls the email
sender exactly once; there is no retry.
"""

import concurrent.futures
import logging

from warranty_claims.config.settings import get_dispatch_config
from warranty_claims.db.constants import NOTIFICATION_FAILED, NOTIFICATION_SENT
from warranty_claims.db.repository import ClaimRepository
from warranty_claims.models.claim import Claim, ClaimStatus
from warranty_claims.notifications.mailer import EmailSender
from warranty_claims.observability import claim_context, get_logger, log_claim_event
from warranty_claims.utils.errors import DispatchError

logger = get_logger(__name__)


class NotificationDispatchCoordinator:
    """Sends one status-update email per committed transition and records the outcome."""

    def __init__(
        self,
        sender: EmailSender,
        repository: ClaimRepository | None = None,
        executor: concurrent.futures.Executor | None = None,
        max_workers: int | None = None,
    ):
        self._sender = sender
        self._repo = repository
        self._owns_executor = executor is None
        self._executor = executor or concurrent.futures.ThreadPoolExecutor(
            max_workers=max_workers or get_dispatch_config()["max_workers"],
            thread_name_prefix="claim-dispatch",
        )

    def submit(self, claim: Claim, new_status: ClaimStatus) -> concurrent.futures.Future | None:
        """Queue dispatch for a committed transition. Never raises.

        Returns the future, or None if the pool no longer accepts work (the
        failure is logged and recorded instead).
        """
        log_claim_event(
            logger, "dispatch_submitted", claim_id=claim.id, status=new_status.value, recipient=claim.email
        )
        try:
            return self._executor.submit(self.dispatch, claim, new_status)
        except RuntimeError as e:
            self._report_failure(claim, new_status, DispatchError(f"Dispatch pool unavailable: {e}"))
            return None

    def dispatch(self, claim: Claim, new_status: ClaimStatus) -> bool:
        """Call the email sender once for this transition. Returns True on success.

        Sender failures are converted to DispatchError, logged and recorded, not raised.
        """
        with claim_context(claim.id, actor="dispatch"):
            try:
                result = self._sender.send(claim.email, claim.order_number, new_status.value)
                if result is False:
                    raise DispatchError("Email sender reported failure")
            except Exception as e:
                err = e if isinstance(e, DispatchError) else DispatchError(str(e) or type(e).__name__)
                self._report_failure(claim, new_status, err)
                return False

            log_claim_event(
                logger, "dispatch_succeeded", claim_id=claim.id, status=new_status.value, recipient=claim.email
            )
            self._record(claim, new_status, NOTIFICATION_SENT)
            return True

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker pool if this coordinator created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def _report_failure(self, claim: Claim, new_status: ClaimStatus, error: DispatchError) -> None:
        log_claim_event(
            logger,
            "dispatch_failed",
            claim_id=claim.id,
            level=logging.ERROR,
            status=new_status.value,
            recipient=claim.email,
            error=error.message,
        )
        self._record(claim, new_status, NOTIFICATION_FAILED, error.message)

    def _record(
        self,
        claim: Claim,
        new_status: ClaimStatus,
        outcome: str,
        error: str | None = None,
    ) -> None:
        if self._repo is None:
            return
        try:
            self._repo.record_notification(claim.id, claim.email, new_status.value, outcome, error)
        except Exception:
            logger.exception("Could not record notification outcome for claim %s", claim.id)
