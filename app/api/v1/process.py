"""Patient progress endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.core.dependencies import get_process_service
from app.orchestration.process_steps import PROCESS_STEPS, RecordBundle, StepView, project, render
from app.schemas.process import ProcessBundleRequest, ProcessProjectionResponse, StepViewResponse
from app.services.process_step_service import ProcessStepService

router = APIRouter(tags=["process"])


def _projection(step_index: int, views: list[StepView]) -> ProcessProjectionResponse:
    return ProcessProjectionResponse(
        step_index=step_index,
        current_step=PROCESS_STEPS[step_index].value,
        steps=[StepViewResponse(step=view.step.value, state=view.state.value) for view in views],
    )


@router.post("/process/project", response_model=ProcessProjectionResponse)
def project_bundle(payload: ProcessBundleRequest) -> ProcessProjectionResponse:
    bundle = RecordBundle(
        prescriptions=payload.prescriptions,
        regulatory_approvals=payload.regulatory_approvals,
        orders=payload.orders,
    )
    step_index = project(bundle)
    return _projection(step_index, render(step_index))


@router.get("/patients/{patient_id}/process", response_model=ProcessProjectionResponse)
def patient_process(
    patient_id: int,
    service: ProcessStepService = Depends(get_process_service),
) -> ProcessProjectionResponse:
    step_index, views = service.project_patient(patient_id)
    return _projection(step_index, views)
