"""Lead pipeline endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.core.dependencies import get_lead_service
from app.core.exceptions import UnknownLeadError
from app.schemas.leads import (
    LeadCreateRequest,
    LeadHistoryResponse,
    LeadResponse,
    LeadStageMoveRequest,
    LeadStatusMoveRequest,
)
from app.services.lead_pipeline_service import LeadPipelineService

router = APIRouter(tags=["leads"])


@router.post(
    "/registries/{registry_id}/leads",
    response_model=LeadResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_lead(
    registry_id: int,
    payload: LeadCreateRequest,
    service: LeadPipelineService = Depends(get_lead_service),
) -> LeadResponse:
    lead = service.create_lead(registry_id=registry_id, **payload.model_dump())
    return LeadResponse.model_validate(lead)


@router.get("/leads/{lead_id}", response_model=LeadResponse)
def get_lead(lead_id: int, service: LeadPipelineService = Depends(get_lead_service)) -> LeadResponse:
    lead = service.get_lead(lead_id)
    if lead is None:
        raise UnknownLeadError(f"Lead {lead_id} not found")
    return LeadResponse.model_validate(lead)


@router.post("/leads/{lead_id}/stage", response_model=LeadResponse)
def move_lead_stage(
    lead_id: int,
    payload: LeadStageMoveRequest,
    service: LeadPipelineService = Depends(get_lead_service),
) -> LeadResponse:
    lead = service.move_to_stage(lead_id, payload.stage_id, actor=payload.actor, notes=payload.notes)
    return LeadResponse.model_validate(lead)


@router.post("/leads/{lead_id}/status", response_model=LeadResponse)
def move_lead_status(
    lead_id: int,
    payload: LeadStatusMoveRequest,
    service: LeadPipelineService = Depends(get_lead_service),
) -> LeadResponse:
    lead = service.move_status(lead_id, payload.status, actor=payload.actor, notes=payload.notes)
    return LeadResponse.model_validate(lead)


@router.get("/leads/{lead_id}/history", response_model=list[LeadHistoryResponse])
def lead_history(lead_id: int, service: LeadPipelineService = Depends(get_lead_service)) -> list[LeadHistoryResponse]:
    return [LeadHistoryResponse.model_validate(row) for row in service.history(lead_id)]
