"""Health endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.core.config import Config
from app.core.dependencies import get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health(cfg: Config = Depends(get_settings)) -> dict:
    return {"status": "ok", "service": cfg.APP_NAME, "version": cfg.APP_VERSION}
