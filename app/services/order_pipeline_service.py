"""Order pipeline service: status transitions, tracking codes and the status outbox."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal

from sqlalchemy import select, update

from app.core.config import get_config
from app.core.enums import ORDER_PAID, ORDER_PENDING, AffiliateEventType, OrderStatus, TrackingKind
from app.core.exceptions import UnknownAffiliateError, UnknownOrderError, ValidationError
from app.core.logging import LogContext, log_extra
from app.models import Affiliate, AffiliateEvent, Order, OrderStatusEvent
from app.models.base import utcnow
from app.orchestration.state_machine import ORDER_STATE_MACHINE
from app.services.base_service import BaseService
from app.utils.validators import sanitize_text

logger = logging.getLogger(__name__)

_TRACKING_COLUMNS = {
    TrackingKind.CARRIER: "tracking_number",
    TrackingKind.REGULATORY: "regulatory_tracking_code",
    TrackingKind.IMPORT: "import_tracking_code",
}


def _parse_kind(kind: TrackingKind | str) -> TrackingKind:
    try:
        return TrackingKind(kind)
    except ValueError as exc:
        allowed = ", ".join(k.value for k in TrackingKind)
        raise ValidationError(f"Unknown tracking kind {kind!r}; expected one of: {allowed}") from exc


class OrderPipelineService(BaseService):
    """Service for order lifecycle commands."""

    def get_order(self, order_id: int) -> Order | None:
        return self.db.get(Order, order_id)

    def _lock_order(self, order_id: int) -> Order:
        order = self.db.execute(select(Order).where(Order.id == order_id).with_for_update()).scalar_one_or_none()
        if order is None:
            raise UnknownOrderError(f"Order {order_id} not found")
        return order

    def create_order(self, patient_id: int, total_amount: Decimal, affiliate_id: int | None = None) -> Order:
        amount = Decimal(str(total_amount))
        if not amount.is_finite() or amount < 0:
            raise ValidationError("Order total must be a non-negative amount")
        if affiliate_id is not None and self.db.get(Affiliate, affiliate_id) is None:
            raise UnknownAffiliateError(f"Affiliate {affiliate_id} not found")

        with self.atomic():
            order = Order(
                patient_id=patient_id,
                affiliate_id=affiliate_id,
                total_amount=amount,
                status=ORDER_PENDING,
            )
            self.db.add(order)

        logger.info(
            "order.created",
            extra=log_extra("order.created", LogContext(order_id=order.id, affiliate_id=affiliate_id)),
        )
        return order

    def transition(self, order_id: int, new_status: OrderStatus | str, actor: str | None = None) -> Order:
        """Apply one status change and write its outbox row in the same transaction."""
        target = getattr(new_status, "value", new_status)
        actor = sanitize_text(actor, max_len=100) or None

        with self.atomic():
            order = self._lock_order(order_id)
            previous = order.status
            ORDER_STATE_MACHINE.assert_transition(current=previous, target=target)

            order.status = target
            self.db.add(
                OrderStatusEvent(
                    order_id=order.id,
                    previous_status=previous,
                    new_status=target,
                    actor=actor,
                    occurred_at=utcnow(),
                )
            )
            if target == ORDER_PAID and order.affiliate_id is not None:
                self.db.add(
                    AffiliateEvent(
                        affiliate_id=order.affiliate_id,
                        event_type=AffiliateEventType.PURCHASE.value,
                        order_id=order.id,
                        order_value=order.total_amount,
                    )
                )

        logger.info(
            "order.transitioned",
            extra=log_extra(
                "order.transitioned",
                LogContext(order_id=order.id, actor=actor),
                previous_status=previous,
                new_status=target,
            ),
        )
        return order

    def attach_tracking(self, order_id: int, kind: TrackingKind | str, code: str) -> Order:
        """Set one tracking code; any status accepts it and the last write wins."""
        tracking_kind = _parse_kind(kind)
        clean_code = sanitize_text(code, max_len=255)
        if not clean_code:
            raise ValidationError("Tracking code must not be blank")

        with self.atomic():
            order = self._lock_order(order_id)
            setattr(order, _TRACKING_COLUMNS[tracking_kind], clean_code)

        logger.info(
            "order.tracking_attached",
            extra=log_extra("order.tracking_attached", LogContext(order_id=order.id), kind=tracking_kind.value),
        )
        return order

    def events(self, order_id: int) -> list[OrderStatusEvent]:
        if self.get_order(order_id) is None:
            raise UnknownOrderError(f"Order {order_id} not found")
        return list(
            self.db.scalars(
                select(OrderStatusEvent).where(OrderStatusEvent.order_id == order_id).order_by(OrderStatusEvent.id)
            )
        )

    def pending_events(self, limit: int | None = None) -> list[OrderStatusEvent]:
        """Undispatched outbox rows, oldest first."""
        batch = limit if limit is not None else get_config().OUTBOX_BATCH_SIZE
        return list(
            self.db.scalars(
                select(OrderStatusEvent)
                .where(OrderStatusEvent.dispatched_at.is_(None))
                .order_by(OrderStatusEvent.id)
                .limit(batch)
            )
        )

    def mark_dispatched(self, event_ids: Iterable[int]) -> int:
        ids = list(event_ids)
        if not ids:
            return 0
        with self.atomic():
            result = self.db.execute(
                update(OrderStatusEvent)
                .where(OrderStatusEvent.id.in_(ids), OrderStatusEvent.dispatched_at.is_(None))
                .values(dispatched_at=utcnow())
            )
        logger.info(
            "order.events_dispatched",
            extra=log_extra("order.events_dispatched", count=result.rowcount),
        )
        return result.rowcount
