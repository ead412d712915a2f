"""Input checks for lookup credentials and search terms.

Values compared against stored claims are never rewritten: an order number is
used exactly as given and an email only loses surrounding whitespace, which
email matching ignores anyway. Input that is too long or carries control
characters is refused, not cut down.
"""

import re

from warranty_claims.utils.errors import InvalidQueryError

# Maximum lengths (characters). Claim intake enforces the same order-number
# and email limits, so every stored claim stays reachable by lookup.
MAX_ORDER_NUMBER = 128
MAX_EMAIL = 254
MAX_SEARCH_TERM = MAX_ORDER_NUMBER

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def _acceptable(text: str, max_length: int) -> bool:
    return len(text) <= max_length and not _CONTROL_CHARS.search(text)


def check_lookup_params(order_number: str | None, email: str | None) -> tuple[str, str] | None:
    """Return the (order number, email) pair to compare, or None if it can never match.

    None covers missing or blank values, non-strings, over-length values and
    values with control characters. Callers answer None with an empty result.
    """
    if not isinstance(order_number, str) or not isinstance(email, str):
        return None
    email = email.strip()
    if not order_number.strip() or not email:
        return None
    if not _acceptable(order_number, MAX_ORDER_NUMBER) or not _acceptable(email, MAX_EMAIL):
        return None
    return order_number, email


def check_search_term(term: str | None) -> str | None:
    """Validate an admin order-number search term. Blank terms become None (no filter).

    Raises InvalidQueryError for terms over MAX_SEARCH_TERM or containing
    control characters.
    """
    if term is None or not term.strip():
        return None
    if not _acceptable(term, MAX_SEARCH_TERM):
        raise InvalidQueryError(
            f"Order number search term must be at most {MAX_SEARCH_TERM} printable characters"
        )
    return term
