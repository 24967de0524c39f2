from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import Engine, create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from config import Settings, get_settings

settings = get_settings()


def _connect_args(settings: Settings) -> dict[str, Any]:
    """libpq options: SSL mode and, unless disabled, read-only transactions."""
    if not settings.is_postgres():
        return {}
    args: dict[str, Any] = {"sslmode": settings.database_sslmode}
    if settings.database_read_only:
        args["options"] = "-c default_transaction_read_only=on"
    return args


def build_engine(settings: Settings) -> Engine:
    """Create the pooled engine for the configured store."""
    kwargs: dict[str, Any] = {
        "echo": settings.log_level == "DEBUG",
        "pool_pre_ping": True,
        "connect_args": _connect_args(settings),
    }
    if settings.is_postgres():
        kwargs["pool_size"] = settings.database_pool_size
        kwargs["max_overflow"] = 0
    return create_engine(settings.database_url, **kwargs)


# create_engine does not connect; the first query does.
engine = build_engine(settings)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_engine() -> Engine:
    """Get the database engine."""
    return engine


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """
    Provide a read scope around a series of queries.

    Nothing is ever committed; the transaction is rolled back on exit.
    """
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


def get_session() -> Generator[Session, None, None]:
    """FastAPI dependency for database sessions."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


def check_connection() -> tuple[str, str | None]:
    """
    Check database connectivity.

    Returns:
        Tuple of (status, error_message). Status is "ok" or "error".
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return "ok", None
    except SQLAlchemyError as e:
        logger.warning(f"Database health check failed: {e}")
        return "error", str(e)


def shutdown() -> None:
    """Close every pooled connection."""
    engine.dispose()
    logger.info("Database connection pool closed")


# Alias used by the routers
get_db = get_session
