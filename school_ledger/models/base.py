"""
Database engine, session management, and base model.

This module is the foundation for all database operations.
Every model inherits from Base. Every request gets a session
from get_db().
"""

import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session

from school_ledger.config import get_settings
from school_ledger.exceptions import StorageError

logger = logging.getLogger(__name__)

settings = get_settings()

# --- Engine ---
# pool_pre_ping=True tests connections before using them,
# so a database restart does not surface as a failed posting.
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
)

# --- Session Factory ---
# autocommit=False: the caller decides when a posting is
# committed, so header, lines and balance updates land together.
# autoflush=False: SQL is only sent on an explicit flush/commit.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally pattern ensures the session is always
    closed, even when the endpoint raises.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """
    Run a block as one all-or-nothing unit of work.

    Commits when the block finishes and rolls back on any
    exception, which is then re-raised (database errors as
    StorageError). A posting interrupted halfway, header
    written but lines not, never becomes visible to other
    sessions.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        logger.exception("Database error, rolling back transaction")
        db.rollback()
        raise StorageError(f"Database error: {e}") from e
    except Exception:
        logger.debug("Rolling back transaction", exc_info=True)
        db.rollback()
        raise
