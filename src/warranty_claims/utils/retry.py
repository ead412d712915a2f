"""Retry utilities with exponential backoff for read-only database access."""

import logging
import sqlite3
from typing import Callable, TypeVar

from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# SQLite reports lock contention as OperationalError with these messages
TRANSIENT_SQLITE_MESSAGES = ("database is locked", "database table is locked", "database is busy")


def is_transient_db_error(exc: BaseException) -> bool:
    """Whether exc is a lock/busy error that is worth retrying."""
    if not isinstance(exc, sqlite3.OperationalError):
        return False
    text = str(exc).lower()
    return any(msg in text for msg in TRANSIENT_SQLITE_MESSAGES)


def with_db_retry(
    max_attempts: int = 3,
    min_wait: float = 0.05,
    max_wait: float = 1.0,
    multiplier: float = 0.1,
):
    """Decorator that retries a read with exponential backoff on lock contention.

    Only apply to reads; a retried write could commit twice.

    Args:
        max_attempts: Maximum number of attempts (default 3).
        min_wait: Minimum wait between retries in seconds.
        max_wait: Maximum wait between retries in seconds.
        multiplier: Base multiplier for exponential backoff.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @retry(
            stop=stop_after_attempt(max_attempts),
            wait=wait_exponential(multiplier=multiplier, min=min_wait, max=max_wait),
            retry=retry_if_exception(is_transient_db_error),
            reraise=True,
        )
        def wrapper(*args, **kwargs) -> T:
            return func(*args, **kwargs)

        return wrapper

    return decorator
