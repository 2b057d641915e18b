"""Affiliate and commission endpoints for API v1."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from app.core.dependencies import get_affiliate_service, get_commission_service
from app.core.exceptions import UnknownAffiliateError
from app.models import Affiliate
from app.schemas.affiliates import (
    AffiliateEnrollRequest,
    AffiliateMetricsResponse,
    AffiliateResponse,
    ClickTrackRequest,
    PurchaseTrackRequest,
    RegistrationTrackRequest,
    TrackResponse,
)
from app.services.affiliate_service import AffiliateService
from app.services.commission_service import CommissionService

router = APIRouter(tags=["affiliates"])


def _affiliate_view(affiliate: Affiliate) -> AffiliateResponse:
    view = AffiliateResponse.model_validate(affiliate)
    return view.model_copy(update={"referral_link": AffiliateService.referral_link(affiliate)})


@router.post("/affiliates", response_model=AffiliateResponse, status_code=status.HTTP_201_CREATED)
def enroll_affiliate(
    payload: AffiliateEnrollRequest,
    service: AffiliateService = Depends(get_affiliate_service),
) -> AffiliateResponse:
    affiliate = service.enroll(
        name=payload.name,
        email=payload.email,
        commission_rate=payload.commission_rate,
        custom_code=payload.custom_code,
    )
    return _affiliate_view(affiliate)


# Declared before /affiliates/{affiliate_id} so "leaderboard" is not read as an id.
@router.get("/affiliates/leaderboard", response_model=list[AffiliateMetricsResponse])
def leaderboard(
    since: datetime | None = Query(default=None),
    until: datetime | None = Query(default=None),
    limit: int | None = Query(default=None, ge=1, le=500),
    service: CommissionService = Depends(get_commission_service),
) -> list[AffiliateMetricsResponse]:
    return [AffiliateMetricsResponse.model_validate(m) for m in service.leaderboard(since, until, limit)]


@router.get("/affiliates/{affiliate_id}", response_model=AffiliateResponse)
def get_affiliate(affiliate_id: int, service: AffiliateService = Depends(get_affiliate_service)) -> AffiliateResponse:
    affiliate = service.get_affiliate(affiliate_id)
    if affiliate is None:
        raise UnknownAffiliateError(f"Affiliate {affiliate_id} not found")
    return _affiliate_view(affiliate)


@router.post("/affiliates/{affiliate_id}/deactivate", response_model=AffiliateResponse)
def deactivate_affiliate(
    affiliate_id: int,
    service: AffiliateService = Depends(get_affiliate_service),
) -> AffiliateResponse:
    return _affiliate_view(service.deactivate(affiliate_id))


@router.get("/affiliates/{affiliate_id}/metrics", response_model=AffiliateMetricsResponse)
def affiliate_metrics(
    affiliate_id: int,
    since: datetime | None = Query(default=None),
    until: datetime | None = Query(default=None),
    service: CommissionService = Depends(get_commission_service),
) -> AffiliateMetricsResponse:
    return AffiliateMetricsResponse.model_validate(service.affiliate_metrics(affiliate_id, since, until))


@router.post("/tracking/click", response_model=TrackResponse)
def track_click(payload: ClickTrackRequest, service: AffiliateService = Depends(get_affiliate_service)) -> TrackResponse:
    event = service.track_click(payload.code, referrer=payload.referrer)
    return TrackResponse(recorded=event is not None, event_id=event.id if event else None)


@router.post("/tracking/registration", response_model=TrackResponse)
def track_registration(
    payload: RegistrationTrackRequest,
    service: AffiliateService = Depends(get_affiliate_service),
) -> TrackResponse:
    event = service.track_registration(payload.code, client_ref=payload.client_ref)
    return TrackResponse(recorded=event is not None, event_id=event.id if event else None)


@router.post(
    "/affiliates/{affiliate_id}/purchases",
    response_model=TrackResponse,
    status_code=status.HTTP_201_CREATED,
)
def track_purchase(
    affiliate_id: int,
    payload: PurchaseTrackRequest,
    service: AffiliateService = Depends(get_affiliate_service),
) -> TrackResponse:
    event = service.track_purchase(affiliate_id, payload.order_id, payload.order_value)
    return TrackResponse(recorded=True, event_id=event.id)
