"""Shared service base with robust session lifecycle behavior."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import DatabaseError
from app.database import db as db_module


class BaseService:
    """Base class for services that operate on a SQLAlchemy session."""

    def __init__(self, db: Session | None = None) -> None:
        self.db = db or db_module.SessionLocal()

    def commit(self) -> None:
        """Commit current transaction and rollback on failure."""
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def rollback(self) -> None:
        self.db.rollback()

    @contextmanager
    def atomic(self) -> Iterator[Session]:
        """Run one read-modify-write unit; any error rolls the whole unit back.

        Row locks taken inside the block are released by the commit or rollback.
        Driver failures surface as DatabaseError; domain errors pass through.
        """
        try:
            yield self.db
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise DatabaseError(f"Database operation failed: {exc.__class__.__name__}") from exc
        except Exception:
            self.db.rollback()
            raise

    def close(self) -> None:
        self.db.close()

    def __enter__(self) -> "BaseService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.rollback()
        self.close()
