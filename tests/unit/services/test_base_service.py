from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker

from app.core.exceptions import DatabaseError, ValidationError
from app.models import Affiliate, Base
from app.services.base_service import BaseService


def _build_session():
    engine = create_engine("sqlite:///:memory:")
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    return TestingSessionLocal()


def _affiliate(code):
    return Affiliate(name="Ana", affiliate_code=code, commission_rate=Decimal("10"))


def _count(session):
    return session.scalar(select(func.count()).select_from(Affiliate))


def test_atomic_commits_on_success():
    session = _build_session()
    service = BaseService(db=session)

    with service.atomic():
        session.add(_affiliate("ANA1"))
    assert _count(session) == 1

    session.close()


def test_atomic_wraps_driver_errors_and_rolls_back():
    session = _build_session()
    service = BaseService(db=session)
    with service.atomic():
        session.add(_affiliate("ANA1"))

    with pytest.raises(DatabaseError):
        with service.atomic():
            session.add(_affiliate("ANA1"))
    assert _count(session) == 1

    session.close()


def test_atomic_passes_domain_errors_through():
    session = _build_session()
    service = BaseService(db=session)

    with pytest.raises(ValidationError):
        with service.atomic():
            session.add(_affiliate("ANA2"))
            raise ValidationError("rejected")
    assert _count(session) == 0

    session.close()
