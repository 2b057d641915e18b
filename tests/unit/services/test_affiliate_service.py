from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

import app.services.affiliate_service as affiliate_module
from app.core.config import get_config
from app.core.enums import AffiliateEventType
from app.core.exceptions import (
    DuplicateAffiliateCodeError,
    DuplicatePurchaseError,
    InvalidCommissionRateError,
    UnknownAffiliateError,
    UnknownOrderError,
    ValidationError,
)
from app.models import AffiliateEvent, Base
from app.services.affiliate_service import AffiliateService
from app.services.commission_service import CommissionService
from app.services.order_pipeline_service import OrderPipelineService


def _build_session():
    engine = create_engine("sqlite:///:memory:")
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    return TestingSessionLocal()


def test_enroll_generates_code_from_name():
    session = _build_session()
    service = AffiliateService(db=session)

    affiliate = service.enroll("José Souza", email="jose@example.com")
    assert affiliate.affiliate_code.startswith("JOSESO")
    assert len(affiliate.affiliate_code) == 10
    assert affiliate.commission_rate == get_config().DEFAULT_COMMISSION_RATE
    assert service.referral_link(affiliate).endswith(f"/?ref={affiliate.affiliate_code}")

    session.close()


def test_enroll_retries_generated_code_on_collision(monkeypatch):
    session = _build_session()
    service = AffiliateService(db=session)
    service.enroll("First", custom_code="TAKEN00001")

    codes = iter(["TAKEN00001", "FREE000001"])
    monkeypatch.setattr(affiliate_module, "new_affiliate_code", lambda name: next(codes))

    assert service.enroll("Second").affiliate_code == "FREE000001"

    session.close()


def test_custom_codes_are_normalized_and_unique():
    session = _build_session()
    service = AffiliateService(db=session)

    affiliate = service.enroll("Promo", custom_code="promo-2024", commission_rate="12.5")
    assert affiliate.affiliate_code == "PROMO2024"
    assert affiliate.commission_rate == Decimal("12.5")

    with pytest.raises(DuplicateAffiliateCodeError):
        service.enroll("Other", custom_code="Promo 2024")

    session.close()


@pytest.mark.parametrize("rate", [-5, "101", "abc"])
def test_enroll_rejects_invalid_rates(rate):
    session = _build_session()
    service = AffiliateService(db=session)

    with pytest.raises(InvalidCommissionRateError):
        service.enroll("Bad Rate", commission_rate=rate)

    session.close()


def test_click_and_registration_tracking():
    session = _build_session()
    service = AffiliateService(db=session)
    affiliate = service.enroll("Carla", custom_code="CARLA")

    click = service.track_click("carla", referrer="https://instagram.com")
    registration = service.track_registration("CARLA", client_ref="client-1")

    assert click.event_type == AffiliateEventType.CLICK.value
    assert click.affiliate_id == affiliate.id
    assert registration.event_type == AffiliateEventType.REGISTRATION.value
    assert registration.client_ref == "client-1"

    session.close()


def test_unknown_or_inactive_codes_are_ignored():
    session = _build_session()
    service = AffiliateService(db=session)
    affiliate = service.enroll("Carla", custom_code="CARLA")

    assert service.track_click("NOPE") is None
    service.deactivate(affiliate.id)
    assert service.track_registration("CARLA", client_ref="client-2") is None
    assert service.get_affiliate(affiliate.id).is_active is False

    session.close()


def test_track_purchase_requires_known_affiliate_and_order():
    session = _build_session()
    service = AffiliateService(db=session)
    affiliate = service.enroll("Carla", custom_code="CARLA")
    orders = OrderPipelineService(db=session)
    order = orders.create_order(patient_id=1, total_amount=Decimal("80"))
    orders.transition(order.id, "paid")

    with pytest.raises(UnknownAffiliateError):
        service.track_purchase(404, order.id)
    with pytest.raises(UnknownOrderError):
        service.track_purchase(affiliate.id, 404)

    event = service.track_purchase(affiliate.id, order.id)
    assert event.order_value == Decimal("80")
    assert orders.get_order(order.id).affiliate_id == affiliate.id

    session.close()


def test_track_purchase_does_not_double_count_paid_order():
    session = _build_session()
    service = AffiliateService(db=session)
    carla = service.enroll("Carla", custom_code="CARLA", commission_rate=10)
    orders = OrderPipelineService(db=session)
    order = orders.create_order(patient_id=1, total_amount=Decimal("250"), affiliate_id=carla.id)
    orders.transition(order.id, "paid")

    with pytest.raises(DuplicatePurchaseError):
        service.track_purchase(carla.id, order.id, Decimal("250"))

    metrics = CommissionService(db=session).affiliate_metrics(carla.id)
    assert metrics.purchases == 1
    assert metrics.total_revenue == Decimal("250.00")
    assert metrics.total_commission == Decimal("25.00")

    session.close()


def test_track_purchase_rejects_other_affiliate_and_unpaid_orders():
    session = _build_session()
    service = AffiliateService(db=session)
    carla = service.enroll("Carla", custom_code="CARLA")
    bruno = service.enroll("Bruno", custom_code="BRUNO")
    orders = OrderPipelineService(db=session)

    carla_order = orders.create_order(patient_id=1, total_amount=Decimal("100"), affiliate_id=carla.id)
    orders.transition(carla_order.id, "paid")
    with pytest.raises(ValidationError):
        service.track_purchase(bruno.id, carla_order.id)

    pending = orders.create_order(patient_id=2, total_amount=Decimal("100"))
    with pytest.raises(ValidationError):
        service.track_purchase(bruno.id, pending.id)

    cancelled = orders.create_order(patient_id=3, total_amount=Decimal("100"))
    orders.transition(cancelled.id, "cancelled")
    with pytest.raises(ValidationError):
        service.track_purchase(bruno.id, cancelled.id)

    assert CommissionService(db=session).affiliate_metrics(bruno.id).purchases == 0

    session.close()


def test_purchase_index_rejects_second_purchase_row():
    session = _build_session()
    service = AffiliateService(db=session)
    carla = service.enroll("Carla", custom_code="CARLA")
    orders = OrderPipelineService(db=session)
    order = orders.create_order(patient_id=1, total_amount=Decimal("40"), affiliate_id=carla.id)
    orders.transition(order.id, "paid")

    session.add(
        AffiliateEvent(
            affiliate_id=carla.id,
            event_type=AffiliateEventType.PURCHASE.value,
            order_id=order.id,
            order_value=Decimal("40"),
        )
    )
    with pytest.raises(IntegrityError):
        session.commit()
    session.rollback()

    session.close()
