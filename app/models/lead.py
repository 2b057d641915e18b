"""Lead model module."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.enums import LEAD_NEW
from app.models.base import AuditMixin, Base, RegistryScopedMixin


class Lead(Base, AuditMixin, RegistryScopedMixin):
    __tablename__ = "leads"
    __table_args__ = (
        Index("idx_leads_registry_stage", "registry_id", "stage_id"),
        Index("idx_leads_status", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320))
    stage_id: Mapped[int | None] = mapped_column(ForeignKey("stages.id", ondelete="RESTRICT"))
    status: Mapped[str] = mapped_column(String(40), default=LEAD_NEW, nullable=False)
    estimated_value: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    assigned_affiliate_id: Mapped[int | None] = mapped_column(ForeignKey("affiliates.id"))
    notes: Mapped[str | None] = mapped_column(Text)

    stage = relationship("Stage")
    history = relationship(
        "LeadStageHistory",
        back_populates="lead",
        order_by="LeadStageHistory.id.desc()",
    )


class LeadStageHistory(Base, AuditMixin):
    __tablename__ = "lead_stage_history"
    __table_args__ = (Index("idx_lead_stage_history_lead", "lead_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    lead_id: Mapped[int] = mapped_column(ForeignKey("leads.id", ondelete="RESTRICT"), nullable=False)
    previous_stage_id: Mapped[int | None] = mapped_column(ForeignKey("stages.id"))
    new_stage_id: Mapped[int | None] = mapped_column(ForeignKey("stages.id"))
    previous_status: Mapped[str | None] = mapped_column(String(40))
    new_status: Mapped[str | None] = mapped_column(String(40))
    actor: Mapped[str] = mapped_column(String(100), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)

    lead = relationship("Lead", back_populates="history")
