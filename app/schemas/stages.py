"""Stage registry request/response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RegistryCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class RegistryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    created_at: datetime | None = None


class StageCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(min_length=1, max_length=100)
    color: str = Field(default="blue", max_length=20)
    description: str | None = Field(default=None, max_length=10000)
    icon: str | None = Field(default=None, max_length=50)


class StageUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    slug: str | None = Field(default=None, min_length=1, max_length=100)
    color: str | None = Field(default=None, max_length=20)
    description: str | None = Field(default=None, max_length=10000)
    icon: str | None = Field(default=None, max_length=50)


class StageReorderRequest(BaseModel):
    # Range is checked against the live stage count, not here.
    target_index: int


class PositionChangeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    stage_id: int
    new_position: int


class StageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    registry_id: int
    name: str
    slug: str
    description: str | None = None
    color: str
    icon: str | None = None
    position: int
    is_active: bool


class StageRemovalResponse(BaseModel):
    stage_id: int
    action: str
