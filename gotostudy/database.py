"""Database initialization and session management.

Provides the engine, table creation and session helpers used by the SQL
repository adapters.
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine, func, select

from .config import AppSettings, get_settings
from .schemas.database import TaskTable, UserTable


logger = logging.getLogger(__name__)


def build_engine(settings: AppSettings | None = None) -> Engine:
    """Create an engine from settings."""
    settings = settings or get_settings()
    return create_engine(settings.database.url, **settings.get_engine_options())


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Get the process-wide engine built from the global settings."""
    return build_engine()


def create_db_and_tables(engine: Engine | None = None) -> None:
    """Create all tables.

    Safe to call multiple times - only creates tables that don't exist.
    """
    engine = engine or get_engine()
    SQLModel.metadata.create_all(engine)
    logger.info(f"Database tables ready at {engine.url.render_as_string()}")


def get_session(engine: Engine | None = None) -> Session:
    """Get a new database session."""
    return Session(engine or get_engine())


@contextmanager
def get_session_context(engine: Engine | None = None) -> Generator[Session, None, None]:
    """Context manager for database sessions with automatic cleanup.

    Usage:
        with get_session_context() as session:
            # Use session here
            pass

    """
    session = get_session(engine)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def verify_database(engine: Engine | None = None) -> bool:
    """Check that both tables are reachable.

    Returns:
        True if database is healthy, False otherwise

    """
    try:
        with get_session_context(engine) as session:
            user_count = session.exec(select(func.count()).select_from(UserTable)).one()
            task_count = session.exec(select(func.count()).select_from(TaskTable)).one()
    except SQLAlchemyError as e:
        logger.error(f"Database verification failed: {e}")
        return False

    logger.info(f"Database verified: {user_count} users, {task_count} tasks")
    return True


__all__ = [
    "build_engine",
    "create_db_and_tables",
    "get_engine",
    "get_session",
    "get_session_context",
    "verify_database",
]
