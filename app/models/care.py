"""Prescription and regulatory approval models read by the progress projection."""

from __future__ import annotations

from datetime import date

from sqlalchemy import Boolean, Date, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.enums import ApprovalStatus
from app.models.base import AuditMixin, Base


class Prescription(Base, AuditMixin):
    __tablename__ = "prescriptions"
    __table_args__ = (Index("idx_prescriptions_patient", "patient_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    patient_id: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    valid_until: Mapped[date | None] = mapped_column(Date)


class RegulatoryApproval(Base, AuditMixin):
    __tablename__ = "regulatory_approvals"
    __table_args__ = (Index("idx_regulatory_approvals_patient", "patient_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    patient_id: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=ApprovalStatus.PENDING.value, nullable=False)
    protocol_number: Mapped[str | None] = mapped_column(String(100), unique=True)
