"""MCP server exposing claim administration tools via stdio transport.

Tools act with admin capability: the stdio transport is only reachable by
whoever launched the process.
"""

import json
from typing import Any, Callable

from mcp.server.fastmcp import FastMCP

from warranty_claims.utils.errors import WarrantyClaimError
from warranty_claims.workflow.access import AdminCaller, AnonymousCaller
from warranty_claims.workflow.service import ClaimService

mcp = FastMCP("warranty-claims", json_response=True)

_service: ClaimService | None = None
_OPERATOR = AdminCaller(name="mcp-operator")


def get_service() -> ClaimService:
    global _service
    if _service is None:
        _service = ClaimService()
    return _service


def set_service(service: ClaimService | None) -> None:
    """Swap the service the tools use (tests, embedding)."""
    global _service
    _service = service


def _run(fn: Callable[[], Any]) -> str:
    try:
        return json.dumps(fn(), default=str)
    except WarrantyClaimError as e:
        return json.dumps(e.to_dict())


@mcp.tool()
def list_claims(status: str | None = None, order_number: str | None = None) -> str:
    """List claims, optionally filtered by status and an order-number substring (case-insensitive)."""
    return _run(lambda: [
        c.model_dump(by_alias=True, mode="json")
        for c in get_service().list_claims(_OPERATOR, status=status, order_number=order_number)
    ])


@mcp.tool()
def get_claim(claim_id: str) -> str:
    """Get one claim by ID."""
    return _run(lambda: get_service().get_claim(_OPERATOR, claim_id).model_dump(by_alias=True, mode="json"))


@mcp.tool()
def lookup_claims(order_number: str, email: str) -> str:
    """Find claims by exact order number and email, as a customer would."""
    return _run(lambda: [
        c.model_dump(by_alias=True, mode="json")
        for c in get_service().lookup_claims(AnonymousCaller(), order_number, email)
    ])


@mcp.tool()
def update_claim_status(claim_id: str, status: str) -> str:
    """Set a claim's status (Pending, In Progress, Resolved, Rejected) and notify the customer."""
    return _run(lambda: get_service().update_status(_OPERATOR, claim_id, status).model_dump(by_alias=True, mode="json"))


@mcp.tool()
def get_claim_history(claim_id: str) -> str:
    """Get the audit log of status changes for a claim."""
    return _run(lambda: get_service().get_history(_OPERATOR, claim_id))


@mcp.tool()
def list_brands(language: str = "en") -> str:
    """List brands with their notice in the given language (falls back to the brand default)."""
    return _run(lambda: [b.model_dump(by_alias=True) for b in get_service().list_brands(language)])


def main() -> None:
    """Run the MCP server with stdio transport (default)."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
