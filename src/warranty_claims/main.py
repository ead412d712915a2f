"""CLI entry point for warranty claim administration.

Commands run with admin capability against the configured database
(WARRANTY_DB_PATH); status changes send the customer email like the API does.
"""

import json
import logging
import sys
from pathlib import Path


def _setup_logging() -> None:
    """Configure logging for CLI usage."""
    from warranty_claims.observability import get_logger

    get_logger("warranty_claims")
    logging.getLogger("warranty_claims").setLevel(
        logging.DEBUG if "--debug" in sys.argv else logging.INFO
    )


def _usage() -> str:
    return """Usage:
  warranty-claims serve [--host=H] [--port=P]       Run the REST API
  warranty-claims status <claim_id>                 Show a claim
  warranty-claims history <claim_id>                Show a claim's audit log
  warranty-claims list [--status=S] [--order=TERM]  List claims
  warranty-claims transition <claim_id> <status>    Change a claim's status
  warranty-claims brands [lang]                     List brands with notices
  warranty-claims seed <data.json>                  Load brands and claims

Statuses: Pending, "In Progress", Resolved, Rejected

Options:
  --debug                            Enable debug logging
  --json                             Use JSON log format
"""


def _option(options: list[str], name: str) -> str | None:
    prefix = f"--{name}="
    for opt in options:
        if opt.startswith(prefix):
            return opt[len(prefix):]
    return None


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _service():
    from warranty_claims.workflow.service import ClaimService
    return ClaimService()


def _admin():
    from warranty_claims.workflow.access import AdminCaller
    return AdminCaller(name="cli")


def cmd_status(claim_id: str) -> None:
    """Print one claim."""
    from warranty_claims.utils.errors import NotFoundError
    try:
        claim = _service().get_claim(_admin(), claim_id)
    except NotFoundError as e:
        _fail(e.message)
    print(json.dumps(claim.model_dump(by_alias=True, mode="json"), indent=2))


def cmd_history(claim_id: str) -> None:
    """Print claim audit log."""
    from warranty_claims.utils.errors import NotFoundError
    try:
        history = _service().get_history(_admin(), claim_id)
    except NotFoundError as e:
        _fail(e.message)
    print(json.dumps(history, indent=2))


def cmd_list(status: str | None = None, order: str | None = None) -> None:
    """Print claims matching the filters."""
    from warranty_claims.utils.errors import WarrantyClaimError
    try:
        claims = _service().list_claims(_admin(), status=status, order_number=order)
    except WarrantyClaimError as e:
        _fail(e.message)
    print(json.dumps([c.model_dump(by_alias=True, mode="json") for c in claims], indent=2))


def cmd_transition(claim_id: str, status: str) -> None:
    """Change a claim's status and wait for the notification to finish."""
    from warranty_claims.utils.errors import WarrantyClaimError
    service = _service()
    try:
        updated = service.update_status(_admin(), claim_id, status)
    except WarrantyClaimError as e:
        _fail(e.message)
    finally:
        service.close()
    print(json.dumps(updated.model_dump(by_alias=True, mode="json"), indent=2))


def cmd_brands(language: str | None = None) -> None:
    """Print brands with their notice in the given language."""
    from warranty_claims.workflow.localization import negotiate_language
    brands = _service().list_brands(negotiate_language(language, None))
    print(json.dumps([b.model_dump(by_alias=True) for b in brands], indent=2))


def cmd_seed(data_path: Path) -> None:
    """Load brands and claims from a JSON file."""
    from pydantic import ValidationError
    from warranty_claims.db.seed import seed_from_file

    if not data_path.exists():
        _fail(f"File not found: {data_path}")
    try:
        counts = seed_from_file(data_path)
    except json.JSONDecodeError as e:
        _fail(f"Invalid JSON in {data_path}: {e}")
    except ValidationError as e:
        _fail(f"Invalid claim data: {e}")
    print(json.dumps(counts, indent=2))


def cmd_serve(host: str, port: int) -> None:
    from warranty_claims.api.server import run
    run(host=host, port=port)


def main() -> None:
    """Run a warranty-claims command."""
    import os

    argv = [arg for arg in sys.argv[1:] if not arg.startswith("--")]
    options = [arg for arg in sys.argv[1:] if arg.startswith("--")]

    if "--json" in options:
        os.environ["WARRANTY_LOG_FORMAT"] = "json"
    if "--debug" in options:
        os.environ["WARRANTY_LOG_LEVEL"] = "DEBUG"

    _setup_logging()

    if not argv:
        print(_usage(), file=sys.stderr)
        sys.exit(1)

    first = argv[0].lower()

    if first in ("status", "history"):
        if len(argv) < 2:
            print(f"Error: {first} requires <claim_id>", file=sys.stderr)
            print(_usage(), file=sys.stderr)
            sys.exit(1)
        if first == "status":
            cmd_status(argv[1])
        else:
            cmd_history(argv[1])
        return

    if first == "transition":
        if len(argv) < 3:
            print("Error: transition requires <claim_id> <status>", file=sys.stderr)
            print(_usage(), file=sys.stderr)
            sys.exit(1)
        cmd_transition(argv[1], " ".join(argv[2:]))
        return

    if first == "list":
        cmd_list(_option(options, "status"), _option(options, "order"))
        return

    if first == "brands":
        cmd_brands(argv[1] if len(argv) > 1 else None)
        return

    if first == "seed":
        if len(argv) < 2:
            print("Error: seed requires <data.json>", file=sys.stderr)
            print(_usage(), file=sys.stderr)
            sys.exit(1)
        cmd_seed(Path(argv[1]))
        return

    if first == "serve":
        port_raw = _option(options, "port") or "8000"
        if not port_raw.isdigit():
            _fail(f"Invalid port: {port_raw}")
        cmd_serve(_option(options, "host") or "127.0.0.1", int(port_raw))
        return

    print(f"Error: Unknown command: {first}", file=sys.stderr)
    print(_usage(), file=sys.stderr)
    sys.exit(1)


if __name__ == "__main__":
    main()
