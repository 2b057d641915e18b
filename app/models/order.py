"""Order and order status event model module."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.enums import ORDER_PENDING
from app.models.base import AuditMixin, Base, utcnow


class Order(Base, AuditMixin):
    __tablename__ = "orders"
    __table_args__ = (
        Index("idx_orders_status", "status"),
        Index("idx_orders_patient", "patient_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    patient_id: Mapped[int] = mapped_column(Integer, nullable=False)
    affiliate_id: Mapped[int | None] = mapped_column(ForeignKey("affiliates.id"))
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(40), default=ORDER_PENDING, nullable=False)
    # Independent side channels; none of them gates a status transition.
    tracking_number: Mapped[str | None] = mapped_column(String(255))
    regulatory_tracking_code: Mapped[str | None] = mapped_column(String(255))
    import_tracking_code: Mapped[str | None] = mapped_column(String(255))

    events = relationship("OrderStatusEvent", back_populates="order", order_by="OrderStatusEvent.id")


class OrderStatusEvent(Base):
    """Outbox row written in the same transaction as an accepted transition."""

    __tablename__ = "order_status_events"
    __table_args__ = (
        Index("idx_order_status_events_order", "order_id"),
        Index("idx_order_status_events_dispatched", "dispatched_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id", ondelete="RESTRICT"), nullable=False)
    previous_status: Mapped[str] = mapped_column(String(40), nullable=False)
    new_status: Mapped[str] = mapped_column(String(40), nullable=False)
    actor: Mapped[str | None] = mapped_column(String(100))
    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    dispatched_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    order = relationship("Order", back_populates="events")
