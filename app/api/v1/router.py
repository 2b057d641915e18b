"""Root API router for v1 endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from app.api.v1 import affiliates, health, leads, orders, process, stages
from app.core.config import get_config

api_router = APIRouter(prefix=get_config().API_PREFIX)
api_router.include_router(health.router)
api_router.include_router(stages.router)
api_router.include_router(leads.router)
api_router.include_router(orders.router)
api_router.include_router(process.router)
api_router.include_router(affiliates.router)


def get_api_router() -> APIRouter:
    return api_router
