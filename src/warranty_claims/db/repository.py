"""Claim and brand repositories: reads, status updates, audit and notification logging."""

import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Collection, Iterable, Optional

from warranty_claims.db.constants import STATUS_PENDING
from warranty_claims.db.database import get_connection
from warranty_claims.models.claim import Brand, Claim, ClaimInput, LocalizedNotification
from warranty_claims.utils.errors import InvalidTransitionError, NotFoundError
from warranty_claims.utils.retry import with_db_retry

ClaimPredicate = Callable[[Claim], bool]


def _generate_id(prefix: str) -> str:
    """Generate a unique record ID."""
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"


def _claim_from_row(row: sqlite3.Row) -> Claim:
    data = dict(row)
    data.pop("updated_at", None)
    return Claim.model_validate(data)


class ClaimRepository:
    """Repository for claim persistence, audit logging and notification outcomes.

    update_claim_status is the only method that changes a stored claim's status.
    """

    def __init__(self, db_path: str | None = None):
        self._db_path = db_path

    def create_claim(self, claim_input: ClaimInput) -> str:
        """Insert new claim in Pending, log 'created' audit entry. Returns claim_id."""
        claim_id = _generate_id("CLM")
        submitted = claim_input.submission_date or datetime.now(timezone.utc)
        if submitted.tzinfo is None:
            submitted = submitted.replace(tzinfo=timezone.utc)
        with get_connection(self._db_path) as conn:
            conn.execute(
                """
                INSERT INTO claims (
                    id, order_number, email, name, street, postal_code, city,
                    phone_number, brand, problem_description, status, submission_date
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    claim_id,
                    claim_input.order_number,
                    claim_input.email,
                    claim_input.name,
                    claim_input.street,
                    claim_input.postal_code,
                    claim_input.city,
                    claim_input.phone_number,
                    claim_input.brand,
                    claim_input.problem_description,
                    STATUS_PENDING,
                    submitted.isoformat(),
                ),
            )
            conn.execute(
                """
                INSERT INTO claim_audit_log (claim_id, action, new_status, details)
                VALUES (?, 'created', ?, ?)
                """,
                (claim_id, STATUS_PENDING, "Claim record created"),
            )
        return claim_id

    @with_db_retry()
    def find_claim_by_id(self, claim_id: str) -> Optional[Claim]:
        """Fetch claim by ID, or None."""
        with get_connection(self._db_path) as conn:
            row = conn.execute(
                "SELECT * FROM claims WHERE id = ?", (claim_id,)
            ).fetchone()
        if row is None:
            return None
        return _claim_from_row(row)

    @with_db_retry()
    def find_claims(
        self,
        predicate: ClaimPredicate | None = None,
        order_number: str | None = None,
    ) -> list[Claim]:
        """Return claims matching predicate, in insertion order.

        order_number, when given, narrows the scan to exact order-number matches
        using the index before the predicate runs.
        """
        with get_connection(self._db_path) as conn:
            if order_number is not None:
                rows = conn.execute(
                    "SELECT * FROM claims WHERE order_number = ? ORDER BY rowid ASC",
                    (order_number,),
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM claims ORDER BY rowid ASC"
                ).fetchall()
        claims = [_claim_from_row(r) for r in rows]
        if predicate is None:
            return claims
        return [c for c in claims if predicate(c)]

    def update_claim_status(
        self,
        claim_id: str,
        new_status: str,
        actor: str | None = None,
        details: str | None = None,
        allowed_from: Collection[str] | None = None,
    ) -> Claim:
        """Set status and log the change in one transaction. Returns the updated claim.

        allowed_from, when given, lists the statuses the claim may currently be in;
        the check runs under the write lock against the stored status.

        Raises NotFoundError if the claim does not exist and InvalidTransitionError
        if its current status is not in allowed_from. Nothing is written in either case.
        """
        with get_connection(self._db_path) as conn:
            # Take the write lock up front so concurrent writers serialize here
            conn.execute("BEGIN IMMEDIATE")
            row = conn.execute(
                "SELECT status FROM claims WHERE id = ?", (claim_id,)
            ).fetchone()
            if row is None:
                raise NotFoundError(f"Claim not found: {claim_id}")
            old_status = row["status"]
            if allowed_from is not None and old_status not in allowed_from:
                raise InvalidTransitionError(
                    f"Claim {claim_id} cannot move from {old_status} to {new_status}"
                )
            conn.execute(
                "UPDATE claims SET status = ?, updated_at = datetime('now') WHERE id = ?",
                (new_status, claim_id),
            )
            conn.execute(
                """
                INSERT INTO claim_audit_log (claim_id, action, old_status, new_status, actor, details)
                VALUES (?, 'status_changed', ?, ?, ?, ?)
                """,
                (claim_id, old_status, new_status, actor, details or ""),
            )
            updated = conn.execute(
                "SELECT * FROM claims WHERE id = ?", (claim_id,)
            ).fetchone()
        return _claim_from_row(updated)

    @with_db_retry()
    def get_claim_history(self, claim_id: str) -> list[dict[str, Any]]:
        """Get audit log entries for a claim."""
        with get_connection(self._db_path) as conn:
            rows = conn.execute(
                """
                SELECT id, claim_id, action, old_status, new_status, actor, details, created_at
                FROM claim_audit_log
                WHERE claim_id = ?
                ORDER BY id ASC
                """,
                (claim_id,),
            ).fetchall()
        return [dict(r) for r in rows]

    def record_notification(
        self,
        claim_id: str,
        recipient: str,
        status: str,
        outcome: str,
        error: str | None = None,
    ) -> None:
        """Record the outcome of one status-change email."""
        with get_connection(self._db_path) as conn:
            conn.execute(
                """
                INSERT INTO notification_log (claim_id, recipient, status, outcome, error)
                VALUES (?, ?, ?, ?, ?)
                """,
                (claim_id, recipient, status, outcome, error),
            )

    @with_db_retry()
    def get_notification_log(self, claim_id: str) -> list[dict[str, Any]]:
        """Get recorded notification outcomes for a claim, oldest first."""
        with get_connection(self._db_path) as conn:
            rows = conn.execute(
                """
                SELECT id, claim_id, recipient, status, outcome, error, created_at
                FROM notification_log
                WHERE claim_id = ?
                ORDER BY id ASC
                """,
                (claim_id,),
            ).fetchall()
        return [dict(r) for r in rows]


class BrandRepository:
    """Repository for brands and their localized notices. Read-only for the claim workflow."""

    def __init__(self, db_path: str | None = None):
        self._db_path = db_path

    def create_brand(
        self,
        name: str,
        default_notification: str = "",
        brand_id: str | None = None,
    ) -> str:
        """Insert a brand. Returns brand_id."""
        brand_id = brand_id or _generate_id("BRD")
        with get_connection(self._db_path) as conn:
            conn.execute(
                "INSERT INTO brands (id, name, default_notification) VALUES (?, ?, ?)",
                (brand_id, name, default_notification),
            )
        return brand_id

    def set_notification(self, brand_id: str, language: str, content: str) -> None:
        """Insert or replace the brand's notice for one language.

        Tags are stored lowercased; "FR" replaces an existing "fr" notice.
        """
        language = language.strip().lower()
        with get_connection(self._db_path) as conn:
            row = conn.execute("SELECT id FROM brands WHERE id = ?", (brand_id,)).fetchone()
            if row is None:
                raise NotFoundError(f"Brand not found: {brand_id}")
            conn.execute(
                """
                INSERT INTO brand_notifications (brand_id, language, content)
                VALUES (?, ?, ?)
                ON CONFLICT (brand_id, language) DO UPDATE SET content = excluded.content
                """,
                (brand_id, language, content),
            )

    @with_db_retry()
    def find_brands(self, languages: Iterable[str] | None = None) -> list[Brand]:
        """Return all brands ordered by name, each with its notices joined in.

        When languages is given only notices in those languages are attached.
        Language codes are compared case-insensitively.
        """
        langs = [lang.lower() for lang in languages] if languages is not None else None
        with get_connection(self._db_path) as conn:
            brand_rows = conn.execute(
                "SELECT id, name, default_notification FROM brands ORDER BY name ASC"
            ).fetchall()
            if langs is None:
                note_rows = conn.execute(
                    "SELECT brand_id, language, content FROM brand_notifications ORDER BY id ASC"
                ).fetchall()
            elif langs:
                placeholders = ", ".join("?" for _ in langs)
                note_rows = conn.execute(
                    f"""
                    SELECT brand_id, language, content FROM brand_notifications
                    WHERE lower(language) IN ({placeholders})
                    ORDER BY id ASC
                    """,
                    langs,
                ).fetchall()
            else:
                note_rows = []
        by_brand: dict[str, list[LocalizedNotification]] = {}
        for r in note_rows:
            by_brand.setdefault(r["brand_id"], []).append(
                LocalizedNotification.model_validate(dict(r))
            )
        return [
            Brand(
                id=r["id"],
                name=r["name"],
                default_notification=r["default_notification"] or "",
                notifications=by_brand.get(r["id"], []),
            )
            for r in brand_rows
        ]

    def find_brand_by_name(self, name: str) -> Optional[Brand]:
        """Fetch a brand with all its notices by display name, or None."""
        for brand in self.find_brands():
            if brand.name == name:
                return brand
        return None
