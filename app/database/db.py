"""Database connection and session management."""

from __future__ import annotations

import logging
from collections.abc import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import get_config

logger = logging.getLogger(__name__)

config = get_config()
DATABASE_URL = config.DATABASE_URL
FALLBACK_SQLITE_URL = "sqlite:///./pipeline.db"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ships with FK enforcement off; stage and order references rely on RESTRICT.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _build_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        sqlite_engine = create_engine(
            database_url,
            echo=config.DEBUG,
            connect_args={"check_same_thread": False},
        )
        event.listen(sqlite_engine, "connect", _enable_sqlite_foreign_keys)
        return sqlite_engine
    return create_engine(
        database_url,
        echo=config.DEBUG,
        pool_pre_ping=True,
        pool_recycle=3600,
        pool_size=10,
        max_overflow=20,
    )


def _configure_engine(database_url: str) -> None:
    global DATABASE_URL, engine, SessionLocal
    DATABASE_URL = database_url
    engine = _build_engine(database_url)
    # Services keep using returned rows after commit, so do not expire them.
    SessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


_configure_engine(DATABASE_URL)


def get_engine() -> Engine:
    """Return the active SQLAlchemy engine."""
    return engine


def get_active_database_url() -> str:
    """Return the currently bound database URL (after fallback, if any)."""
    return DATABASE_URL


def get_db() -> Generator[Session, None, None]:
    """Yield a request-scoped session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _ping() -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def verify_database_connection() -> bool:
    """Check connectivity; optional databases may fall back to local SQLite."""
    try:
        _ping()
        return True
    except Exception as exc:  # pragma: no cover - exercised in deployment.
        if config.DB_CONNECTIVITY_REQUIRED:
            logger.exception("database.connection_failed", extra={"event": "database.connection_failed"})
            return False
        logger.warning(
            "database.connection_failed.optional",
            extra={"event": "database.connection_failed.optional", "reason": str(exc)},
        )
        return _fallback_to_sqlite()


def _fallback_to_sqlite() -> bool:
    if DATABASE_URL.startswith("sqlite"):
        return False

    original_url = DATABASE_URL
    _configure_engine(FALLBACK_SQLITE_URL)
    try:
        _ping()
    except Exception as fallback_exc:  # pragma: no cover - deployment edge case.
        _configure_engine(original_url)
        logger.error(
            "database.connection_fallback.failed",
            extra={"event": "database.connection_fallback.failed", "reason": str(fallback_exc)},
        )
        return False

    logger.warning(
        "database.connection_fallback.sqlite",
        extra={
            "event": "database.connection_fallback.sqlite",
            "from_scheme": original_url.split("://", 1)[0],
        },
    )
    return True
