"""Affiliate conversion and commission metrics.

All money arithmetic stays in Decimal because the totals feed payout
obligations.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from app.core.exceptions import InvalidCommissionRateError

CENT = Decimal("0.01")
TENTH = Decimal("0.1")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class RawCounts:
    clicks: int = 0
    registrations: int = 0
    purchases: int = 0
    total_revenue: Decimal = Decimal("0")


@dataclass(frozen=True)
class AffiliateMetrics:
    affiliate_id: int
    clicks: int
    registrations: int
    purchases: int
    total_revenue: Decimal
    total_commission: Decimal
    conversion_rate: Decimal


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so 0.1 becomes Decimal("0.1") and not its binary expansion.
    return Decimal(str(value))


def validate_commission_rate(commission_rate: Decimal | int | float | str | None) -> Decimal:
    """Return the rate as Decimal; missing, negative or >100 rates are rejected.

    A silent zero would be indistinguishable from an affiliate without sales.
    """
    if commission_rate is None or isinstance(commission_rate, bool):
        raise InvalidCommissionRateError("Commission rate is required")
    try:
        rate = to_decimal(commission_rate)
    except (InvalidOperation, ValueError) as exc:
        raise InvalidCommissionRateError(f"Commission rate {commission_rate!r} is not a number") from exc
    if not rate.is_finite() or rate < 0 or rate > HUNDRED:
        raise InvalidCommissionRateError(f"Commission rate must be between 0 and 100, got {commission_rate}")
    return rate


def conversion_rate(purchases: int, registrations: int) -> Decimal:
    if registrations == 0:
        return Decimal("0")
    return (Decimal(purchases) / Decimal(registrations) * HUNDRED).quantize(TENTH, rounding=ROUND_HALF_UP)


def compute_metrics(
    affiliate_id: int,
    counts: RawCounts,
    commission_rate: Decimal | int | float | str | None,
) -> AffiliateMetrics:
    rate = validate_commission_rate(commission_rate)
    revenue = to_decimal(counts.total_revenue).quantize(CENT, rounding=ROUND_HALF_UP)
    commission = (revenue * rate / HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)
    return AffiliateMetrics(
        affiliate_id=affiliate_id,
        clicks=counts.clicks,
        registrations=counts.registrations,
        purchases=counts.purchases,
        total_revenue=revenue,
        total_commission=commission,
        conversion_rate=conversion_rate(counts.purchases, counts.registrations),
    )


def rank(metrics: Iterable[AffiliateMetrics]) -> list[AffiliateMetrics]:
    """Order by revenue desc, then registrations desc, then affiliate id asc."""
    return sorted(metrics, key=lambda m: (-m.total_revenue, -m.registrations, m.affiliate_id))
