"""Brand notice selection by language.

The request language is computed once per request by negotiate_language and
passed explicitly to the resolver; nothing here reads ambient request state.
"""

from typing import Iterable

from warranty_claims.config.settings import get_default_language
from warranty_claims.models.claim import Brand, BrandView


def parse_accept_language(header: str | None) -> str | None:
    """Return the first language tag of an Accept-Language header.

    "fr-CH,fr;q=0.9,en;q=0.8" -> "fr-CH". Quality weights are not ranked; the
    client lists its preferred tag first.
    """
    if not header:
        return None
    first = header.split(",")[0].split(";")[0].strip()
    if not first or first == "*":
        return None
    return first


def negotiate_language(
    query_language: str | None,
    accept_language: str | None,
    default: str | None = None,
) -> str:
    """Pick the request language: explicit parameter, then header, then the configured default."""
    if query_language and query_language.strip():
        return query_language.strip()
    from_header = parse_accept_language(accept_language)
    if from_header:
        return from_header
    return default or get_default_language()


def normalize_language(tag: str | None) -> str:
    """Canonical form used for storage and comparison: trimmed and lowercased.

    Language tags are case-insensitive, so "FR" and "fr" name the same variant.
    Regions are kept: "fr-CH" is a different variant from "fr".
    """
    return (tag or "").strip().lower()


class LocalizedNotificationResolver:
    """Selects the one notice text a brand shows for a requested language."""

    def resolve(self, brand: Brand, requested_language: str) -> str:
        """Return the brand's notice in requested_language, else its default (or "")."""
        wanted = normalize_language(requested_language)
        for notice in brand.notifications:
            if wanted and normalize_language(notice.language) == wanted:
                return notice.content
        return brand.default_notification or ""

    def resolve_brands(self, brands: Iterable[Brand], requested_language: str) -> list[BrandView]:
        return [
            BrandView(id=b.id, name=b.name, notification=self.resolve(b, requested_language))
            for b in brands
        ]
