from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.exceptions import UnknownAffiliateError
from app.models import Base
from app.services.affiliate_service import AffiliateService
from app.services.commission_service import CommissionService
from app.services.order_pipeline_service import OrderPipelineService


def _build_session():
    engine = create_engine("sqlite:///:memory:")
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    return TestingSessionLocal()


def _paid_order(session, affiliate_id, amount):
    orders = OrderPipelineService(db=session)
    order = orders.create_order(patient_id=1, total_amount=Decimal(amount), affiliate_id=affiliate_id)
    orders.transition(order.id, "paid")
    return order


def test_affiliate_metrics_aggregate_events():
    session = _build_session()
    affiliates = AffiliateService(db=session)
    carla = affiliates.enroll("Carla", custom_code="CARLA", commission_rate="10")
    for _ in range(5):
        affiliates.track_click("CARLA")
    for ref in ("a", "b", "c"):
        affiliates.track_registration("CARLA", client_ref=ref)
    _paid_order(session, carla.id, "150.00")
    _paid_order(session, carla.id, "49.99")

    metrics = CommissionService(db=session).affiliate_metrics(carla.id)
    assert metrics.clicks == 5
    assert metrics.registrations == 3
    assert metrics.purchases == 2
    assert metrics.total_revenue == Decimal("199.99")
    assert metrics.total_commission == Decimal("20.00")
    assert metrics.conversion_rate == Decimal("66.7")

    session.close()


def test_affiliate_without_events_has_zero_metrics():
    session = _build_session()
    carla = AffiliateService(db=session).enroll("Carla", custom_code="CARLA")

    metrics = CommissionService(db=session).affiliate_metrics(carla.id)
    assert metrics.total_revenue == Decimal("0.00")
    assert metrics.total_commission == Decimal("0.00")
    assert metrics.conversion_rate == Decimal("0")

    with pytest.raises(UnknownAffiliateError):
        CommissionService(db=session).affiliate_metrics(999)

    session.close()


def test_window_is_half_open():
    session = _build_session()
    affiliates = AffiliateService(db=session)
    carla = affiliates.enroll("Carla", custom_code="CARLA")
    old = affiliates.track_click("CARLA")
    affiliates.track_click("CARLA")

    boundary = datetime.now(timezone.utc) - timedelta(days=1)
    old.created_at = boundary - timedelta(days=1)
    session.commit()

    service = CommissionService(db=session)
    assert service.affiliate_metrics(carla.id, since=boundary).clicks == 1
    assert service.affiliate_metrics(carla.id, until=boundary).clicks == 1
    assert service.affiliate_metrics(carla.id, since=boundary - timedelta(days=1), until=boundary).clicks == 1

    session.close()


def test_leaderboard_ranks_active_affiliates():
    session = _build_session()
    affiliates = AffiliateService(db=session)
    ana = affiliates.enroll("Ana", custom_code="ANA")
    bia = affiliates.enroll("Bia", custom_code="BIA")
    caio = affiliates.enroll("Caio", custom_code="CAIO")
    gone = affiliates.enroll("Gone", custom_code="GONE")
    _paid_order(session, ana.id, "100")
    _paid_order(session, bia.id, "100")
    affiliates.track_registration("BIA", client_ref="x")
    _paid_order(session, gone.id, "999")
    affiliates.deactivate(gone.id)

    board = CommissionService(db=session).leaderboard()
    assert [m.affiliate_id for m in board] == [bia.id, ana.id, caio.id]
    assert [m.affiliate_id for m in CommissionService(db=session).leaderboard(limit=1)] == [bia.id]

    session.close()
