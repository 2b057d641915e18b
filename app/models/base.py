"""Shared SQLAlchemy base and common mixins for the pipeline models."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp helper."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base class for the pipeline schema."""


class AuditMixin:
    """Standard audit fields for all domain models."""

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class RegistryScopedMixin:
    """Mixin for rows that belong to one stage registry."""

    registry_id: Mapped[int] = mapped_column(
        ForeignKey("stage_registries.id", ondelete="RESTRICT"), nullable=False, index=True
    )
