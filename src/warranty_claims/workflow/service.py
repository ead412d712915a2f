"""Claim service: every external surface (REST, MCP, CLI) goes through here.

Each operation runs the access gate first, then the component that does the work.
"""

from warranty_claims.db.repository import BrandRepository, ClaimRepository
from warranty_claims.models.claim import BrandView, Claim
from warranty_claims.notifications.mailer import EmailSender, build_email_sender
from warranty_claims.workflow.access import Caller, ClaimAccessGate
from warranty_claims.workflow.dispatch import NotificationDispatchCoordinator
from warranty_claims.workflow.localization import LocalizedNotificationResolver, normalize_language
from warranty_claims.workflow.queries import ClaimQueryEngine
from warranty_claims.workflow.status_machine import ClaimStatusMachine


class ClaimService:
    def __init__(
        self,
        claims: ClaimRepository | None = None,
        brands: BrandRepository | None = None,
        dispatcher: NotificationDispatchCoordinator | None = None,
        sender: EmailSender | None = None,
    ):
        self.claims = claims or ClaimRepository()
        self.brands = brands or BrandRepository()
        self.dispatcher = dispatcher or NotificationDispatchCoordinator(
            sender or build_email_sender(), repository=self.claims
        )
        self.gate = ClaimAccessGate()
        self.queries = ClaimQueryEngine(self.claims)
        self.machine = ClaimStatusMachine(self.claims, self.dispatcher)
        self.resolver = LocalizedNotificationResolver()

    def list_claims(
        self,
        caller: Caller,
        status: str | None = None,
        order_number: str | None = None,
    ) -> list[Claim]:
        self.gate.authorize_listing(caller)
        return self.queries.list_claims(status, order_number)

    def lookup_claims(self, caller: Caller, order_number: str | None, email: str | None) -> list[Claim]:
        self.gate.authorize_lookup(caller, order_number, email)
        found = self.queries.lookup(order_number, email)
        self.gate.record_lookup(caller, found)
        return found

    def get_claim(self, caller: Caller, claim_id: str) -> Claim:
        self.gate.authorize_fetch(caller, claim_id)
        return self.queries.get_by_id(claim_id)

    def update_status(self, caller: Caller, claim_id: str, status: object) -> Claim:
        self.gate.authorize_mutation(caller, claim_id)
        return self.machine.transition(claim_id, status, actor=caller.name)

    def get_history(self, caller: Caller, claim_id: str) -> list[dict]:
        self.gate.authorize_listing(caller)
        self.queries.get_by_id(claim_id)
        return self.claims.get_claim_history(claim_id)

    def list_brands(self, language: str) -> list[BrandView]:
        """Brands with their notice resolved for language. Open to any caller."""
        wanted = normalize_language(language)
        brands = self.brands.find_brands([wanted] if wanted else [])
        return self.resolver.resolve_brands(brands, language)

    def close(self) -> None:
        self.dispatcher.shutdown(wait=True)
