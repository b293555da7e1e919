"""Retry and row-locking helpers for balance updates."""
import logging
import time

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError

logger = logging.getLogger(__name__)


def lock_for_update(query):
    """
    Apply row-level locking (SELECT ... FOR UPDATE).

    NOTE: SQLite ignores FOR UPDATE; PostgreSQL honors it.
    """
    return query.with_for_update()


def run_with_retry(session, func, *, attempts: int = 3, backoff_base: float = 0.1):
    """
    Execute a unit of work, retrying on lock timeouts / deadlocks.

    `func` must perform the whole transaction (reads included): after a
    failure the session is rolled back and the unit is re-run from scratch.
    Domain errors are never retried.
    """
    for attempt in range(attempts):
        try:
            return func()
        except (OperationalError, StaleDataError) as exc:
            session.rollback()
            if attempt >= attempts - 1:
                raise
            delay = backoff_base * (2 ** attempt)
            logger.warning(f"[DB] Concurrency failure ({exc.__class__.__name__}), retry {attempt + 1} in {delay:.2f}s")
            time.sleep(delay)
