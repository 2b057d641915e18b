"""Commission read model: aggregates affiliate events into metrics and rankings."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import case, func, select

from app.core.enums import AffiliateEventType
from app.core.exceptions import UnknownAffiliateError
from app.core.logging import LogContext, log_extra
from app.models import Affiliate, AffiliateEvent
from app.orchestration.commission import AffiliateMetrics, RawCounts, compute_metrics, rank, to_decimal
from app.services.base_service import BaseService

logger = logging.getLogger(__name__)


def _count_of(event_type: AffiliateEventType):
    return func.coalesce(func.sum(case((AffiliateEvent.event_type == event_type.value, 1), else_=0)), 0)


class CommissionService(BaseService):
    """Service for affiliate metrics over a half-open `[since, until)` window."""

    def _raw_counts(
        self,
        affiliate_ids: list[int] | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> dict[int, RawCounts]:
        revenue = func.coalesce(
            func.sum(
                case(
                    (AffiliateEvent.event_type == AffiliateEventType.PURCHASE.value, AffiliateEvent.order_value),
                    else_=None,
                )
            ),
            0,
        )
        stmt = select(
            AffiliateEvent.affiliate_id,
            _count_of(AffiliateEventType.CLICK),
            _count_of(AffiliateEventType.REGISTRATION),
            _count_of(AffiliateEventType.PURCHASE),
            revenue,
        ).group_by(AffiliateEvent.affiliate_id)
        if affiliate_ids is not None:
            stmt = stmt.where(AffiliateEvent.affiliate_id.in_(affiliate_ids))
        if since is not None:
            stmt = stmt.where(AffiliateEvent.created_at >= since)
        if until is not None:
            stmt = stmt.where(AffiliateEvent.created_at < until)

        counts: dict[int, RawCounts] = {}
        for affiliate_id, clicks, registrations, purchases, total in self.db.execute(stmt):
            counts[affiliate_id] = RawCounts(
                clicks=int(clicks),
                registrations=int(registrations),
                purchases=int(purchases),
                total_revenue=to_decimal(total),
            )
        return counts

    def affiliate_metrics(
        self,
        affiliate_id: int,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> AffiliateMetrics:
        affiliate = self.db.get(Affiliate, affiliate_id)
        if affiliate is None:
            raise UnknownAffiliateError(f"Affiliate {affiliate_id} not found")
        counts = self._raw_counts([affiliate_id], since, until).get(affiliate_id, RawCounts())
        metrics = compute_metrics(affiliate_id, counts, affiliate.commission_rate)
        logger.debug(
            "commission.metrics",
            extra=log_extra("commission.metrics", LogContext(affiliate_id=affiliate_id), purchases=metrics.purchases),
        )
        return metrics

    def leaderboard(
        self,
        since: datetime | None = None,
        until: datetime | None = None,
        limit: int | None = None,
    ) -> list[AffiliateMetrics]:
        """Active affiliates ranked by revenue, registrations, then id."""
        affiliates = list(self.db.scalars(select(Affiliate).where(Affiliate.is_active.is_(True))))
        counts = self._raw_counts([a.id for a in affiliates], since, until)
        ranked = rank(
            compute_metrics(a.id, counts.get(a.id, RawCounts()), a.commission_rate) for a in affiliates
        )
        logger.info(
            "commission.leaderboard",
            extra=log_extra("commission.leaderboard", affiliates=len(ranked)),
        )
        return ranked[:limit] if limit is not None else ranked

