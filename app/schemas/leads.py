"""Lead request/response schemas for API contracts."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class LeadCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=320)
    estimated_value: Decimal | None = Field(default=None, ge=0)
    assigned_affiliate_id: int | None = Field(default=None, ge=1)
    stage_id: int | None = Field(default=None, ge=1)
    notes: str | None = Field(default=None, max_length=10000)


class LeadStageMoveRequest(BaseModel):
    stage_id: int = Field(ge=1)
    actor: str = Field(min_length=1, max_length=100)
    notes: str | None = Field(default=None, max_length=10000)


class LeadStatusMoveRequest(BaseModel):
    status: str = Field(min_length=2, max_length=40)
    actor: str = Field(min_length=1, max_length=100)
    notes: str | None = Field(default=None, max_length=10000)


class LeadResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    registry_id: int
    stage_id: int | None = None
    status: str
    name: str
    email: str | None = None
    estimated_value: Decimal | None = None
    assigned_affiliate_id: int | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LeadHistoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    lead_id: int
    previous_stage_id: int | None = None
    new_stage_id: int | None = None
    previous_status: str | None = None
    new_status: str | None = None
    actor: str
    notes: str | None = None
    created_at: datetime | None = None
