"""REST API for brands and claims."""

from warranty_claims.api.server import create_app

__all__ = ["create_app"]
