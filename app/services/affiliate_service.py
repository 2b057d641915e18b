"""Affiliate enrolment and referral event tracking."""

from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import select

from app.core.config import get_config
from app.core.enums import ORDER_ATTRIBUTABLE, AffiliateEventType
from app.core.exceptions import (
    DuplicateAffiliateCodeError,
    DuplicatePurchaseError,
    UnknownAffiliateError,
    UnknownOrderError,
    ValidationError,
)
from app.core.logging import LogContext, log_extra
from app.models import Affiliate, AffiliateEvent, Order
from app.orchestration.commission import validate_commission_rate
from app.services.base_service import BaseService
from app.utils.ids import new_affiliate_code
from app.utils.validators import normalize_code, require_text, sanitize_text

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 10


class AffiliateService(BaseService):
    """Service for affiliates and their click, registration and purchase events."""

    def get_affiliate(self, affiliate_id: int) -> Affiliate | None:
        return self.db.get(Affiliate, affiliate_id)

    def get_by_code(self, code: str) -> Affiliate | None:
        normalized = normalize_code(code)
        if not normalized:
            return None
        return self.db.scalars(select(Affiliate).where(Affiliate.affiliate_code == normalized)).first()

    def _require_affiliate(self, affiliate_id: int) -> Affiliate:
        affiliate = self.get_affiliate(affiliate_id)
        if affiliate is None:
            raise UnknownAffiliateError(f"Affiliate {affiliate_id} not found")
        return affiliate

    def _code_taken(self, code: str) -> bool:
        return self.db.scalar(select(Affiliate.id).where(Affiliate.affiliate_code == code)) is not None

    def _unique_code(self, name: str) -> str:
        for _ in range(MAX_CODE_ATTEMPTS):
            code = new_affiliate_code(name)
            if not self._code_taken(code):
                return code
        raise DuplicateAffiliateCodeError(f"Could not generate a free affiliate code for {name!r}")

    def enroll(
        self,
        name: str,
        email: str | None = None,
        commission_rate: Decimal | int | str | None = None,
        custom_code: str | None = None,
    ) -> Affiliate:
        clean_name = require_text(name, "Affiliate name")
        rate = validate_commission_rate(
            commission_rate if commission_rate is not None else get_config().DEFAULT_COMMISSION_RATE
        )

        if custom_code is not None:
            code = normalize_code(custom_code)
            if not code:
                raise ValidationError("Affiliate code must contain at least one letter or digit")
            if self._code_taken(code):
                raise DuplicateAffiliateCodeError(f"Affiliate code {code} is already in use")
        else:
            code = self._unique_code(clean_name)

        with self.atomic():
            affiliate = Affiliate(
                name=clean_name,
                email=sanitize_text(email, max_len=320) or None,
                affiliate_code=code[:40],
                commission_rate=rate,
                is_active=True,
            )
            self.db.add(affiliate)

        logger.info(
            "affiliate.enrolled",
            extra=log_extra("affiliate.enrolled", LogContext(affiliate_id=affiliate.id), code=affiliate.affiliate_code),
        )
        return affiliate

    @staticmethod
    def referral_link(affiliate: Affiliate) -> str:
        return f"{get_config().AFFILIATE_BASE_URL}/?ref={affiliate.affiliate_code}"

    def _active_by_code(self, code: str, event: str) -> Affiliate | None:
        affiliate = self.get_by_code(code)
        if affiliate is None or not affiliate.is_active:
            logger.warning(
                f"affiliate.{event}.ignored",
                extra=log_extra(f"affiliate.{event}.ignored", code=code),
            )
            return None
        return affiliate

    def _record(self, affiliate: Affiliate, event_type: AffiliateEventType, **fields) -> AffiliateEvent:
        with self.atomic():
            event = AffiliateEvent(affiliate_id=affiliate.id, event_type=event_type.value, **fields)
            self.db.add(event)
        logger.info(
            f"affiliate.{event_type.value}",
            extra=log_extra(f"affiliate.{event_type.value}", LogContext(affiliate_id=affiliate.id)),
        )
        return event

    def track_click(self, code: str, referrer: str | None = None) -> AffiliateEvent | None:
        affiliate = self._active_by_code(code, "click")
        if affiliate is None:
            return None
        return self._record(affiliate, AffiliateEventType.CLICK, referrer=sanitize_text(referrer, max_len=500) or None)

    def track_registration(self, code: str, client_ref: str) -> AffiliateEvent | None:
        affiliate = self._active_by_code(code, "registration")
        if affiliate is None:
            return None
        return self._record(
            affiliate,
            AffiliateEventType.REGISTRATION,
            client_ref=require_text(client_ref, "Client reference", max_len=100),
        )

    def _has_purchase(self, order_id: int) -> bool:
        return (
            self.db.scalar(
                select(AffiliateEvent.id).where(
                    AffiliateEvent.order_id == order_id,
                    AffiliateEvent.event_type == AffiliateEventType.PURCHASE.value,
                )
            )
            is not None
        )

    def track_purchase(
        self,
        affiliate_id: int,
        order_id: int,
        order_value: Decimal | None = None,
    ) -> AffiliateEvent:
        """Attribute a paid order that carried no affiliate when it entered `paid`.

        An order yields at most one purchase event, whichever path records it.
        """
        affiliate = self._require_affiliate(affiliate_id)
        value = None
        if order_value is not None:
            value = Decimal(str(order_value))
            if not value.is_finite() or value < 0:
                raise ValidationError("Order value must be a non-negative amount")

        with self.atomic():
            order = self.db.execute(select(Order).where(Order.id == order_id).with_for_update()).scalar_one_or_none()
            if order is None:
                raise UnknownOrderError(f"Order {order_id} not found")
            if order.status not in ORDER_ATTRIBUTABLE:
                raise ValidationError(f"Order {order_id} is {order.status}; only paid orders can be attributed")
            if order.affiliate_id is not None and order.affiliate_id != affiliate.id:
                raise ValidationError(f"Order {order_id} is attributed to affiliate {order.affiliate_id}")
            if self._has_purchase(order_id):
                raise DuplicatePurchaseError(f"Order {order_id} already has a purchase event")

            order.affiliate_id = affiliate.id
            event = AffiliateEvent(
                affiliate_id=affiliate.id,
                event_type=AffiliateEventType.PURCHASE.value,
                order_id=order_id,
                order_value=value if value is not None else order.total_amount,
            )
            self.db.add(event)

        logger.info(
            "affiliate.purchase",
            extra=log_extra("affiliate.purchase", LogContext(affiliate_id=affiliate.id, order_id=order_id)),
        )
        return event

    def deactivate(self, affiliate_id: int) -> Affiliate:
        affiliate = self._require_affiliate(affiliate_id)
        with self.atomic():
            affiliate.is_active = False
        logger.info(
            "affiliate.deactivated",
            extra=log_extra("affiliate.deactivated", LogContext(affiliate_id=affiliate_id)),
        )
        return affiliate
