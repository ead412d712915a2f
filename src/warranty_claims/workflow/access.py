"""Caller capabilities and the authorization checks in front of claim operations.

Callers are an explicit tagged variant: AdminCaller may list, fetch and mutate
anything; AnonymousCaller may look up by (order number, email) and then fetch
only the claims its own lookups returned.
"""

import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Union

from warranty_claims.models.claim import Claim
from warranty_claims.utils.errors import ForbiddenError


class Role(str, Enum):
    ADMIN = "admin"
    ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class AdminCaller:
    """Authenticated administrator. How the identity was established is not our concern."""

    name: str = "admin"
    role: Role = field(default=Role.ADMIN, init=False)


@dataclass
class AnonymousCaller:
    """Unauthenticated customer, scoped to one session."""

    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    revealed_claim_ids: set[str] = field(default_factory=set)
    role: Role = field(default=Role.ANONYMOUS, init=False)

    @property
    def name(self) -> str:
        return f"anonymous:{self.session_id[:8]}"


Caller = Union[AdminCaller, AnonymousCaller]


class ClaimAccessGate:
    """Capability checks. Each authorize_* returns None or raises ForbiddenError."""

    def authorize_listing(self, caller: Caller) -> None:
        if caller.role is not Role.ADMIN:
            raise ForbiddenError("Admin access required")

    def authorize_mutation(self, caller: Caller, claim_id: str) -> None:
        if caller.role is not Role.ADMIN:
            raise ForbiddenError(f"Changing claim {claim_id} requires admin access")

    def authorize_lookup(self, caller: Caller, order_number: str | None, email: str | None) -> None:
        """Any caller may look up claims by order number and email."""
        return None

    def authorize_fetch(self, caller: Caller, claim_id: str) -> None:
        """Admins fetch anything; anonymous callers only what their own lookups returned."""
        if caller.role is Role.ADMIN:
            return
        if claim_id not in caller.revealed_claim_ids:
            raise ForbiddenError("Look up the claim by order number and email first")

    def record_lookup(self, caller: Caller, claims: Iterable[Claim]) -> None:
        """Remember which claims an anonymous caller has proven ownership of."""
        if caller.role is Role.ANONYMOUS:
            caller.revealed_claim_ids.update(c.id for c in claims)


class AnonymousSessionStore:
    """In-memory anonymous sessions keyed by session id, oldest evicted past max_sessions."""

    def __init__(self, max_sessions: int = 10_000):
        self._max = max_sessions
        self._sessions: "OrderedDict[str, AnonymousCaller]" = OrderedDict()
        self._lock = threading.Lock()

    def get_or_create(self, session_id: str | None) -> AnonymousCaller:
        with self._lock:
            if session_id and session_id in self._sessions:
                self._sessions.move_to_end(session_id)
                return self._sessions[session_id]
            caller = AnonymousCaller()
            self._sessions[caller.session_id] = caller
            while len(self._sessions) > self._max:
                self._sessions.popitem(last=False)
            return caller

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
