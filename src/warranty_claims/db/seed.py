"""Load brands and claims from a JSON document into the database.

Document shape::

    {
      "brands": [
        {"name": "Acme", "defaultNotification": "...", "notifications": {"fr": "...", "de": "..."}}
      ],
      "claims": [
        {"orderNumber": "A-1001", "email": "...", "name": "...", "brand": "Acme", ...}
      ]
    }

Re-running does not duplicate: brands are keyed by name, claims by
(orderNumber, email, brand).
"""

import json
from pathlib import Path
from typing import Any

from warranty_claims.db.repository import BrandRepository, ClaimRepository
from warranty_claims.models.claim import ClaimInput


def seed_from_dict(
    data: dict[str, Any],
    claims: ClaimRepository | None = None,
    brands: BrandRepository | None = None,
) -> dict[str, int]:
    """Insert missing brands and claims. Returns counts of inserted and skipped records."""
    claims = claims or ClaimRepository()
    brands = brands or BrandRepository()
    counts = {"brands": 0, "claims": 0, "skipped": 0}

    known = {b.name: b for b in brands.find_brands()}
    for entry in data.get("brands", []):
        name = entry["name"]
        if name in known:
            counts["skipped"] += 1
            continue
        brand_id = brands.create_brand(
            name,
            entry.get("defaultNotification", ""),
            brand_id=entry.get("id"),
        )
        for language, content in (entry.get("notifications") or {}).items():
            brands.set_notification(brand_id, language, content)
        counts["brands"] += 1

    existing = {(c.order_number, c.email, c.brand) for c in claims.find_claims()}
    for entry in data.get("claims", []):
        claim_input = ClaimInput.model_validate(entry)
        key = (claim_input.order_number, claim_input.email, claim_input.brand)
        if key in existing:
            counts["skipped"] += 1
            continue
        claims.create_claim(claim_input)
        existing.add(key)
        counts["claims"] += 1
    return counts


def seed_from_file(path: str | Path, db_path: str | None = None) -> dict[str, int]:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return seed_from_dict(data, ClaimRepository(db_path), BrandRepository(db_path))
