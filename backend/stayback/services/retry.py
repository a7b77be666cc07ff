"""Bounded retry for store calls that can fail on a dropped connection."""
import logging
import time
from typing import Callable, TypeVar

from fastapi import HTTPException, status
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.orm import Session

from stayback.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _is_transient(exc: Exception) -> bool:
    if isinstance(exc, OperationalError):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


def with_db_retry(db: Session, query_fn: Callable[[], T], description: str = "query") -> T:
    """Run ``query_fn`` up to DB_RETRY_ATTEMPTS times with exponential backoff.

    Only connection-level failures are retried; the session is rolled back
    between attempts. Exhaustion surfaces as a retryable 503.
    """
    attempts = max(1, settings.DB_RETRY_ATTEMPTS)
    for attempt in range(1, attempts + 1):
        try:
            return query_fn()
        except DBAPIError as exc:
            if not _is_transient(exc):
                raise
            db.rollback()
            if attempt == attempts:
                logger.error("Store unavailable for %s after %d attempts: %s", description, attempts, exc)
                raise HTTPException(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    detail="Database temporarily unavailable. Please try again.",
                )
            delay = settings.DB_RETRY_BASE_DELAY_SECONDS * (2 ** (attempt - 1))
            logger.warning("Store unavailable for %s, retrying in %.2fs (%d/%d)",
                           description, delay, attempt, attempts)
            time.sleep(delay)
    raise RuntimeError("unreachable")
