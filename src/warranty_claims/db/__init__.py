"""SQLite persistence for claims, brands, audit and notification logs."""

from warranty_claims.config.settings import get_db_path
from warranty_claims.db.database import get_connection, init_db
from warranty_claims.db.repository import BrandRepository, ClaimRepository

__all__ = [
    "BrandRepository",
    "ClaimRepository",
    "get_connection",
    "get_db_path",
    "init_db",
]
