"""
Maintenance lock for the account balance table.

Incremental balance updates take the lock in shared mode and
a full recalculation takes it exclusively, so a recalculation
never interleaves with postings.

On PostgreSQL this is a transaction-scoped advisory lock and is
released automatically at commit or rollback. SQLite already
serializes writers on the database file, so there the calls do
nothing.
"""

import logging

from sqlalchemy import text
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

# Arbitrary application-wide key for pg_advisory_xact_lock.
BALANCE_LOCK_KEY = 7_204_511


def _dialect(db: Session) -> str:
    return db.get_bind().dialect.name


def acquire_shared(db: Session) -> None:
    """Block until no recalculation is running, then hold off new ones."""
    if _dialect(db) == "postgresql":
        db.execute(
            text("SELECT pg_advisory_xact_lock_shared(:key)"),
            {"key": BALANCE_LOCK_KEY},
        )


def acquire_exclusive(db: Session) -> None:
    """Block until every in-flight posting has committed or rolled back."""
    if _dialect(db) == "postgresql":
        logger.info("Waiting for exclusive balance maintenance lock")
        db.execute(
            text("SELECT pg_advisory_xact_lock(:key)"),
            {"key": BALANCE_LOCK_KEY},
        )
