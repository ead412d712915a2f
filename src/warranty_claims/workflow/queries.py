"""Claim queries: admin listing/search, anonymous credential lookup and fetch by id."""

from warranty_claims.db.repository import ClaimRepository
from warranty_claims.models.claim import Claim
from warranty_claims.observability import get_logger, log_claim_event
from warranty_claims.utils.errors import NotFoundError
from warranty_claims.utils.sanitization import check_lookup_params, check_search_term
from warranty_claims.workflow.status_machine import parse_status

logger = get_logger(__name__)


def emails_match(stored: str, supplied: str) -> bool:
    """Email comparison used by anonymous lookup: trimmed and case-insensitive."""
    return stored.strip().casefold() == supplied.strip().casefold()


class ClaimQueryEngine:
    """Read paths over the claim collection. Nothing here mutates state."""

    def __init__(self, repository: ClaimRepository | None = None):
        self._repo = repository or ClaimRepository()

    def list_claims(
        self,
        status_filter: str | None = None,
        order_number_substring: str | None = None,
    ) -> list[Claim]:
        """Claims with the given status AND an order number containing the term (case-insensitive).

        Omitted or blank filters match everything. Results keep insertion order.
        Raises InvalidStatusError for an unrecognized status filter and
        InvalidQueryError for an over-long search term.
        """
        status = parse_status(status_filter) if status_filter else None
        term = check_search_term(order_number_substring)
        needle = term.casefold() if term else None

        def matches(claim: Claim) -> bool:
            if status is not None and claim.status != status:
                return False
            if needle is not None and needle not in claim.order_number.casefold():
                return False
            return True

        return self._repo.find_claims(matches)

    def lookup(self, order_number: str | None, email: str | None) -> list[Claim]:
        """Claims whose order number matches exactly and whose email matches.

        Returns [] when nothing matches or a credential is blank or unusable,
        so callers cannot tell which of the two was wrong.
        """
        params = check_lookup_params(order_number, email)
        if params is None:
            return []
        order_number, email = params
        found = self._repo.find_claims(
            lambda c: emails_match(c.email, email),
            order_number=order_number,
        )
        # sorted() is stable, so equal dates keep insertion order
        found = sorted(found, key=lambda c: c.submission_date)
        log_claim_event(logger, "lookup_performed", matched=len(found))
        return found

    def get_by_id(self, claim_id: str) -> Claim:
        """Fetch one claim. Raises NotFoundError if absent."""
        claim = self._repo.find_claim_by_id(claim_id)
        if claim is None:
            raise NotFoundError(f"Claim not found: {claim_id}")
        return claim
