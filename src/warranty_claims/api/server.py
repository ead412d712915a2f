"""FastAPI application exposing brands and claims over REST.

Endpoints:
    GET   /api/brands            brands with notices in the request language
    GET   /api/claims            admin listing, or anonymous lookup when
                                 orderNumber and email are both given
    GET   /api/claims/{claim_id} single claim
    PATCH /api/claims/{claim_id} status change, body {"status": ...}

Admins authenticate with ``Authorization: Bearer <WARRANTY_ADMIN_TOKEN>``.
Anonymous callers carry their session in the ``X-Session-Id`` header, which
every anonymous response returns.
"""

import hmac
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import Depends, FastAPI, Header, Query, Request, Response
from fastapi.responses import JSONResponse

from warranty_claims.config.settings import get_admin_token
from warranty_claims.models.claim import Claim, StatusUpdate
from warranty_claims.observability import get_logger
from warranty_claims.utils.errors import WarrantyClaimError
from warranty_claims.workflow.access import AdminCaller, AnonymousSessionStore, Caller
from warranty_claims.workflow.localization import negotiate_language
from warranty_claims.workflow.service import ClaimService

logger = get_logger(__name__)

SESSION_HEADER = "X-Session-Id"
BRANDS_ERROR = "An error occurred while fetching brands"


def _claim_payload(claim: Claim) -> dict[str, Any]:
    return claim.model_dump(by_alias=True, mode="json")


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def create_app(
    service: ClaimService | None = None,
    sessions: AnonymousSessionStore | None = None,
) -> FastAPI:
    """Build the app around a ClaimService (a default one is created from the environment)."""
    claim_service = service or ClaimService()
    session_store = sessions or AnonymousSessionStore()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        claim_service.close()

    app = FastAPI(title="Warranty Claims", lifespan=lifespan)
    app.state.service = claim_service
    app.state.sessions = session_store

    @app.exception_handler(WarrantyClaimError)
    async def claim_error_handler(request: Request, exc: WarrantyClaimError) -> JSONResponse:
        return JSONResponse(status_code=exc.http_status, content=exc.to_dict())

    def get_caller(
        response: Response,
        authorization: Optional[str] = Header(default=None),
        x_session_id: Optional[str] = Header(default=None),
    ) -> Caller:
        token = _bearer_token(authorization)
        admin_token = get_admin_token()
        if token and admin_token and hmac.compare_digest(token, admin_token):
            return AdminCaller()
        caller = session_store.get_or_create(x_session_id)
        response.headers[SESSION_HEADER] = caller.session_id
        return caller

    @app.get("/api/brands")
    def list_brands(
        lang: Optional[str] = Query(default=None),
        accept_language: Optional[str] = Header(default=None),
    ):
        language = negotiate_language(lang, accept_language)
        try:
            brands = claim_service.list_brands(language)
        except Exception:
            logger.exception("Error fetching brands")
            return JSONResponse(status_code=500, content={"error": BRANDS_ERROR})
        return [b.model_dump(by_alias=True) for b in brands]

    @app.get("/api/claims")
    def list_claims(
        status: Optional[str] = Query(default=None),
        order_number: Optional[str] = Query(default=None, alias="orderNumber"),
        email: Optional[str] = Query(default=None),
        caller: Caller = Depends(get_caller),
    ):
        if order_number is not None and email is not None:
            claims = claim_service.lookup_claims(caller, order_number, email)
        else:
            claims = claim_service.list_claims(caller, status=status, order_number=order_number)
        return [_claim_payload(c) for c in claims]

    @app.get("/api/claims/{claim_id}")
    def get_claim(claim_id: str, caller: Caller = Depends(get_caller)):
        return _claim_payload(claim_service.get_claim(caller, claim_id))

    @app.patch("/api/claims/{claim_id}")
    def update_claim_status(
        claim_id: str,
        body: StatusUpdate,
        caller: Caller = Depends(get_caller),
    ):
        updated = claim_service.update_status(caller, claim_id, body.status)
        return _claim_payload(updated)

    @app.get("/api/claims/{claim_id}/history")
    def get_claim_history(claim_id: str, caller: Caller = Depends(get_caller)):
        return claim_service.get_history(caller, claim_id)

    @app.get("/healthz")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return app


def run(host: str = "127.0.0.1", port: int = 8000) -> None:
    """Serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)
