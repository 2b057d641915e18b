"""Patient progress service: loads a record bundle and projects it."""

from __future__ import annotations

import logging

from sqlalchemy import select

from app.models import Order, Prescription, RegulatoryApproval
from app.orchestration.process_steps import PROCESS_STEPS, RecordBundle, StepView, project, render
from app.services.base_service import BaseService

logger = logging.getLogger(__name__)


class ProcessStepService(BaseService):
    """Read-only service; the projection is recomputed on every call."""

    def load_bundle(self, patient_id: int) -> RecordBundle:
        return RecordBundle(
            prescriptions=list(
                self.db.scalars(
                    select(Prescription).where(
                        Prescription.patient_id == patient_id,
                        Prescription.is_active.is_(True),
                    )
                )
            ),
            regulatory_approvals=list(
                self.db.scalars(select(RegulatoryApproval).where(RegulatoryApproval.patient_id == patient_id))
            ),
            orders=list(self.db.scalars(select(Order).where(Order.patient_id == patient_id))),
        )

    def project_patient(self, patient_id: int) -> tuple[int, list[StepView]]:
        step_index = project(self.load_bundle(patient_id))
        logger.debug(
            "process.projected",
            extra={"event": "process.projected", "patient_id": patient_id, "step": PROCESS_STEPS[step_index].value},
        )
        return step_index, render(step_index)
