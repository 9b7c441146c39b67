import logging
import os
from contextlib import contextmanager

from sqlalchemy import Engine
from sqlmodel import Session, SQLModel, create_engine

from marketplace.config import config
from marketplace.models import Admin, Appointment, Lead, Profile  # noqa: F401

logger = logging.getLogger(__name__)

_engine: Engine | None = None


class DatabaseError(Exception):
    """Custom exception for database operations."""

    def __init__(self, message: str, original_error: Exception | None = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


def get_engine() -> Engine:
    global _engine

    if _engine is not None:
        return _engine

    database_url = config.DATABASE_URL

    if os.environ.get("PYTEST_VERSION"):
        database_url = config.TEST_DATABASE_URL

    if not database_url:
        raise DatabaseError("DATABASE_URL is not configured")

    _engine = create_engine(
        database_url,
        echo=config.LOG_LEVEL == "DEBUG",
        pool_size=10,
        max_overflow=20,
        pool_timeout=30,
        pool_recycle=1800,
    )
    return _engine


async def initialize_database():
    """Create the database tables."""
    try:
        engine = get_engine()
        SQLModel.metadata.create_all(engine)
        logger.info("Database initialized successfully.")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise DatabaseError("Failed to initialize database", original_error=e)


@contextmanager
def get_db_session():
    engine = get_engine()
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Database operation failed: {e}")
        # Raise a concealed database error
        raise DatabaseError("Database operation failed", original_error=e)
    finally:
        session.close()
