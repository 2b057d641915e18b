"""Patient progress schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ProcessRecord(BaseModel):
    status: str | None = Field(default=None, max_length=40)


class ProcessBundleRequest(BaseModel):
    prescriptions: list[ProcessRecord] = Field(default_factory=list)
    regulatory_approvals: list[ProcessRecord] = Field(default_factory=list)
    orders: list[ProcessRecord] = Field(default_factory=list)


class StepViewResponse(BaseModel):
    step: str
    state: str


class ProcessProjectionResponse(BaseModel):
    step_index: int
    current_step: str
    steps: list[StepViewResponse]
