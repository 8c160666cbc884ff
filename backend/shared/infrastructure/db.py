"""
Database configuration and session management.
Uses SQLAlchemy 2.0 patterns.
"""

from collections.abc import Generator
from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from shared.config.settings import settings


@lru_cache
def get_engine() -> Engine:
    """
    Build the application engine on first use.

    Importing this module never loads a database driver; tests bind their
    own SQLite engine instead.
    """
    return create_engine(
        settings.database_url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=30,
        pool_recycle=1800,
        echo=False,  # SQL logging goes through setup_logging()
    )


SessionLocal = sessionmaker(
    autoflush=False,
    autocommit=False,
)


def _new_session() -> Session:
    return SessionLocal(bind=get_engine())


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI-style dependency for database sessions.

    The session is closed after the caller finishes with it.
    """
    db = _new_session()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Context manager for database sessions outside of a request.

    Usage:
        with get_db_context() as db:
            ProductService(db).list_products(ProductFilters(), actor)
    """
    db = _new_session()
    try:
        yield db
    finally:
        db.close()


def safe_commit(db: Session) -> None:
    """
    Commit with automatic rollback on failure.

    Raises the original exception after rolling back.
    """
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
