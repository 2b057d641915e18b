"""Stage registry and stage model module."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.enums import StageColor
from app.models.base import AuditMixin, Base, RegistryScopedMixin


class StageRegistry(Base, AuditMixin):
    __tablename__ = "stage_registries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    stages = relationship("Stage", back_populates="stage_registry", order_by="Stage.position")


class Stage(Base, AuditMixin, RegistryScopedMixin):
    __tablename__ = "stages"
    __table_args__ = (
        Index("idx_stages_registry_position", "registry_id", "position"),
        Index("idx_stages_registry_slug", "registry_id", "slug"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    color: Mapped[str] = mapped_column(String(20), default=StageColor.BLUE.value, nullable=False)
    icon: Mapped[str | None] = mapped_column(String(50), default="Circle")
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    # Set when a lead first enters the stage; the slug is frozen from then on.
    first_referenced_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    stage_registry = relationship("StageRegistry", back_populates="stages")

    @property
    def is_referenced(self) -> bool:
        return self.first_referenced_at is not None
