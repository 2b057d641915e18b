"""Affiliate and affiliate event model module."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Index, Integer, Numeric, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import AuditMixin, Base


class Affiliate(Base, AuditMixin):
    __tablename__ = "affiliates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320))
    affiliate_code: Mapped[str] = mapped_column(String(40), unique=True, nullable=False)
    # Percentage, 0..100.
    commission_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    events = relationship("AffiliateEvent", back_populates="affiliate")


class AffiliateEvent(Base, AuditMixin):
    __tablename__ = "affiliate_events"
    __table_args__ = (
        Index("idx_affiliate_events_affiliate_type_created", "affiliate_id", "event_type", "created_at"),
        # At most one purchase per order.
        Index(
            "uq_affiliate_events_purchase_order",
            "order_id",
            unique=True,
            sqlite_where=text("event_type = 'purchase'"),
            postgresql_where=text("event_type = 'purchase'"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    affiliate_id: Mapped[int] = mapped_column(ForeignKey("affiliates.id", ondelete="CASCADE"), nullable=False)
    event_type: Mapped[str] = mapped_column(String(20), nullable=False)
    client_ref: Mapped[str | None] = mapped_column(String(100))
    order_id: Mapped[int | None] = mapped_column(ForeignKey("orders.id"))
    order_value: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    referrer: Mapped[str | None] = mapped_column(String(500))

    affiliate = relationship("Affiliate", back_populates="events")
