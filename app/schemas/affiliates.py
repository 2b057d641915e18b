"""Affiliate request/response schemas for API contracts."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class AffiliateEnrollRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=320)
    # Bounds are enforced by the commission rules so the error code stays stable.
    commission_rate: Decimal | None = None
    custom_code: str | None = Field(default=None, min_length=1, max_length=40)


class AffiliateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str | None = None
    affiliate_code: str
    commission_rate: Decimal
    is_active: bool
    referral_link: str | None = None
    created_at: datetime | None = None


class ClickTrackRequest(BaseModel):
    code: str = Field(min_length=1, max_length=40)
    referrer: str | None = Field(default=None, max_length=500)


class RegistrationTrackRequest(BaseModel):
    code: str = Field(min_length=1, max_length=40)
    client_ref: str = Field(min_length=1, max_length=100)


class PurchaseTrackRequest(BaseModel):
    order_id: int = Field(ge=1)
    order_value: Decimal | None = Field(default=None, ge=0)


class TrackResponse(BaseModel):
    recorded: bool
    event_id: int | None = None


class AffiliateMetricsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    affiliate_id: int
    clicks: int
    registrations: int
    purchases: int
    total_revenue: Decimal
    total_commission: Decimal
    conversion_rate: Decimal
