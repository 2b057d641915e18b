"""Dependency providers for API handlers."""

from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.config import Config, get_config
from app.database.db import get_db
from app.services.affiliate_service import AffiliateService
from app.services.commission_service import CommissionService
from app.services.lead_pipeline_service import LeadPipelineService
from app.services.order_pipeline_service import OrderPipelineService
from app.services.process_step_service import ProcessStepService
from app.services.stage_registry_service import StageRegistryService


def get_settings() -> Config:
    """Return validated application configuration."""
    return get_config()


def get_db_session() -> Generator[Session, None, None]:
    """Yield SQLAlchemy session for dependency injection."""
    yield from get_db()


def get_stage_service(db: Session = Depends(get_db_session)) -> StageRegistryService:
    return StageRegistryService(db)


def get_lead_service(db: Session = Depends(get_db_session)) -> LeadPipelineService:
    return LeadPipelineService(db)


def get_order_service(db: Session = Depends(get_db_session)) -> OrderPipelineService:
    return OrderPipelineService(db)


def get_process_service(db: Session = Depends(get_db_session)) -> ProcessStepService:
    return ProcessStepService(db)


def get_commission_service(db: Session = Depends(get_db_session)) -> CommissionService:
    return CommissionService(db)


def get_affiliate_service(db: Session = Depends(get_db_session)) -> AffiliateService:
    return AffiliateService(db)
