"""Tests for loading brands and claims from JSON."""

import json

from warranty_claims.db.seed import seed_from_dict, seed_from_file

DATA = {
    "brands": [
        {"name": "Nordlicht", "defaultNotification": "Default", "notifications": {"fr": "Avis"}},
        {"name": "Vireo"},
    ],
    "claims": [
        {"orderNumber": "A1", "email": "x@y.com", "name": "X", "brand": "Nordlicht"},
        {"orderNumber": "A2", "email": "x@y.com", "name": "X", "brand": "Vireo", "street": "Main 1"},
    ],
}


def test_seed_inserts_brands_notifications_and_claims(claim_repo, brand_repo):
    counts = seed_from_dict(DATA, claim_repo, brand_repo)
    assert counts == {"brands": 2, "claims": 2, "skipped": 0}
    nordlicht = brand_repo.find_brand_by_name("Nordlicht")
    assert [(n.language, n.content) for n in nordlicht.notifications] == [("fr", "Avis")]
    claims = claim_repo.find_claims()
    assert [c.order_number for c in claims] == ["A1", "A2"]
    assert claims[1].formatted_address == "Address not provided"


def test_seed_is_idempotent(claim_repo, brand_repo):
    seed_from_dict(DATA, claim_repo, brand_repo)
    counts = seed_from_dict(DATA, claim_repo, brand_repo)
    assert counts == {"brands": 0, "claims": 0, "skipped": 4}
    assert len(claim_repo.find_claims()) == 2


def test_seed_from_file(tmp_path, temp_db, claim_repo):
    path = tmp_path / "data.json"
    path.write_text(json.dumps(DATA), encoding="utf-8")
    counts = seed_from_file(path, db_path=temp_db)
    assert counts["claims"] == 2
    assert len(claim_repo.find_claims()) == 2
