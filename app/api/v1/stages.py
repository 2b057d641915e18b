"""Stage registry endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.core.dependencies import get_stage_service
from app.models import Stage
from app.schemas.stages import (
    PositionChangeResponse,
    RegistryCreateRequest,
    RegistryResponse,
    StageCreateRequest,
    StageRemovalResponse,
    StageReorderRequest,
    StageResponse,
    StageUpdateRequest,
)
from app.services.stage_registry_service import StageRegistryService

router = APIRouter(tags=["stages"])


def _stage_view(stage: Stage, position: int | None = None) -> StageResponse:
    view = StageResponse.model_validate(stage)
    if position is not None:
        view = view.model_copy(update={"position": position})
    return view


def _dense_position(service: StageRegistryService, stage: Stage) -> int | None:
    if not stage.is_active:
        return None
    ids = [s.id for s in service.list_stages(stage.registry_id)]
    return ids.index(stage.id)


@router.post("/registries", response_model=RegistryResponse, status_code=status.HTTP_201_CREATED)
def create_registry(
    payload: RegistryCreateRequest,
    service: StageRegistryService = Depends(get_stage_service),
) -> RegistryResponse:
    return RegistryResponse.model_validate(service.create_registry(payload.name))


@router.get("/registries/{registry_id}/stages", response_model=list[StageResponse])
def list_stages(registry_id: int, service: StageRegistryService = Depends(get_stage_service)) -> list[StageResponse]:
    # Stored positions can keep gaps after an archive; the list index is authoritative.
    return [_stage_view(stage, index) for index, stage in enumerate(service.list_stages(registry_id))]


@router.post(
    "/registries/{registry_id}/stages",
    response_model=StageResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_stage(
    registry_id: int,
    payload: StageCreateRequest,
    service: StageRegistryService = Depends(get_stage_service),
) -> StageResponse:
    stage = service.create_stage(
        registry_id=registry_id,
        name=payload.name,
        slug=payload.slug,
        color=payload.color,
        description=payload.description,
        icon=payload.icon,
    )
    return _stage_view(stage)


@router.post("/stages/{stage_id}/reorder", response_model=list[PositionChangeResponse])
def reorder_stage(
    stage_id: int,
    payload: StageReorderRequest,
    service: StageRegistryService = Depends(get_stage_service),
) -> list[PositionChangeResponse]:
    changes = service.reorder(stage_id, payload.target_index)
    return [PositionChangeResponse.model_validate(change) for change in changes]


@router.post("/stages/{stage_id}/archive", response_model=StageResponse)
def archive_stage(stage_id: int, service: StageRegistryService = Depends(get_stage_service)) -> StageResponse:
    return _stage_view(service.archive(stage_id))


@router.patch("/stages/{stage_id}", response_model=StageResponse)
def update_stage(
    stage_id: int,
    payload: StageUpdateRequest,
    service: StageRegistryService = Depends(get_stage_service),
) -> StageResponse:
    stage = service.update_stage(stage_id, **payload.model_dump(exclude_unset=True))
    return _stage_view(stage, _dense_position(service, stage))


@router.delete("/stages/{stage_id}", response_model=StageRemovalResponse)
def remove_stage(stage_id: int, service: StageRegistryService = Depends(get_stage_service)) -> StageRemovalResponse:
    return StageRemovalResponse(stage_id=stage_id, action=service.remove_stage(stage_id))
