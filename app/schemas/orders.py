"""Order request/response schemas for API contracts."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class OrderCreateRequest(BaseModel):
    patient_id: int = Field(ge=1)
    total_amount: Decimal = Field(ge=0)
    affiliate_id: int | None = Field(default=None, ge=1)


class OrderTransitionRequest(BaseModel):
    # Unknown statuses are rejected by the transition table, not by the schema.
    status: str = Field(min_length=1, max_length=40)
    actor: str | None = Field(default=None, max_length=100)


class TrackingAttachRequest(BaseModel):
    code: str = Field(min_length=1, max_length=255)


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    affiliate_id: int | None = None
    total_amount: Decimal
    status: str
    tracking_number: str | None = None
    regulatory_tracking_code: str | None = None
    import_tracking_code: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderStatusEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    previous_status: str
    new_status: str
    actor: str | None = None
    occurred_at: datetime
    dispatched_at: datetime | None = None


class DispatchRequest(BaseModel):
    event_ids: list[int] = Field(min_length=1, max_length=1000)


class DispatchResponse(BaseModel):
    dispatched: int
