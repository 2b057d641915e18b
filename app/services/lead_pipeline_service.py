"""Lead pipeline service: kanban stage moves and the legacy status pipeline."""

from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import select

from app.core.enums import LEAD_NEW, LeadStatus
from app.core.exceptions import (
    UnknownAffiliateError,
    UnknownLeadError,
    UnknownRegistryError,
    UnknownStageError,
    ValidationError,
)
from app.core.logging import LogContext, log_extra
from app.models import Affiliate, Lead, LeadStageHistory, Stage, StageRegistry
from app.models.base import utcnow
from app.orchestration.state_machine import LEAD_STATE_MACHINE
from app.services.base_service import BaseService
from app.utils.validators import require_text, sanitize_text

logger = logging.getLogger(__name__)


class LeadPipelineService(BaseService):
    """Service for lead creation and lead moves."""

    def get_lead(self, lead_id: int) -> Lead | None:
        return self.db.get(Lead, lead_id)

    def _require_lead(self, lead_id: int, lock: bool = False) -> Lead:
        stmt = select(Lead).where(Lead.id == lead_id)
        if lock:
            stmt = stmt.with_for_update()
        lead = self.db.execute(stmt).scalar_one_or_none()
        if lead is None:
            raise UnknownLeadError(f"Lead {lead_id} not found")
        return lead

    def _active_stage_in(self, registry_id: int, stage_id: int) -> Stage:
        stage = self.db.get(Stage, stage_id)
        if stage is None or not stage.is_active or stage.registry_id != registry_id:
            raise UnknownStageError(f"Stage {stage_id} is not an active stage of registry {registry_id}")
        return stage

    def _first_active_stage(self, registry_id: int) -> Stage | None:
        return self.db.scalars(
            select(Stage)
            .where(Stage.registry_id == registry_id, Stage.is_active.is_(True))
            .order_by(Stage.position, Stage.id)
            .limit(1)
        ).first()

    @staticmethod
    def _mark_referenced(stage: Stage | None) -> None:
        if stage is not None and stage.first_referenced_at is None:
            stage.first_referenced_at = utcnow()

    def create_lead(
        self,
        registry_id: int,
        name: str,
        email: str | None = None,
        estimated_value: Decimal | None = None,
        assigned_affiliate_id: int | None = None,
        stage_id: int | None = None,
        notes: str | None = None,
    ) -> Lead:
        if self.db.get(StageRegistry, registry_id) is None:
            raise UnknownRegistryError(f"Stage registry {registry_id} not found")
        if estimated_value is not None and Decimal(estimated_value) < 0:
            raise ValidationError("Estimated value must not be negative")
        if assigned_affiliate_id is not None and self.db.get(Affiliate, assigned_affiliate_id) is None:
            raise UnknownAffiliateError(f"Affiliate {assigned_affiliate_id} not found")

        stage = (
            self._active_stage_in(registry_id, stage_id)
            if stage_id is not None
            else self._first_active_stage(registry_id)
        )

        with self.atomic():
            lead = Lead(
                registry_id=registry_id,
                name=require_text(name, "Lead name"),
                email=sanitize_text(email, max_len=320) or None,
                stage_id=stage.id if stage else None,
                status=LEAD_NEW,
                estimated_value=estimated_value,
                assigned_affiliate_id=assigned_affiliate_id,
                notes=sanitize_text(notes) or None,
            )
            self.db.add(lead)
            self._mark_referenced(stage)

        logger.info(
            "lead.created",
            extra=log_extra(
                "lead.created",
                LogContext(registry_id=registry_id, lead_id=lead.id, stage_id=lead.stage_id),
            ),
        )
        return lead

    def move_to_stage(self, lead_id: int, stage_id: int, actor: str, notes: str | None = None) -> Lead:
        """Move a lead to any active stage of its registry and record the move."""
        actor = require_text(actor, "Actor", max_len=100)

        with self.atomic():
            lead = self._require_lead(lead_id, lock=True)
            target = self._active_stage_in(lead.registry_id, stage_id)
            if lead.stage_id == target.id:
                return lead

            previous_stage_id = lead.stage_id
            lead.stage_id = target.id
            self._mark_referenced(target)
            self.db.add(
                LeadStageHistory(
                    lead_id=lead.id,
                    previous_stage_id=previous_stage_id,
                    new_stage_id=target.id,
                    previous_status=lead.status,
                    new_status=lead.status,
                    actor=actor,
                    notes=sanitize_text(notes) or None,
                )
            )

        logger.info(
            "lead.stage_moved",
            extra=log_extra(
                "lead.stage_moved",
                LogContext(registry_id=lead.registry_id, lead_id=lead.id, stage_id=target.id, actor=actor),
                previous_stage_id=previous_stage_id,
            ),
        )
        return lead

    def move_status(
        self,
        lead_id: int,
        new_status: LeadStatus | str,
        actor: str,
        notes: str | None = None,
    ) -> Lead:
        """Move a lead one step along the legacy status pipeline."""
        actor = require_text(actor, "Actor", max_len=100)
        target = getattr(new_status, "value", new_status)

        with self.atomic():
            lead = self._require_lead(lead_id, lock=True)
            LEAD_STATE_MACHINE.assert_transition(current=lead.status, target=target)

            previous_status = lead.status
            lead.status = target
            self.db.add(
                LeadStageHistory(
                    lead_id=lead.id,
                    previous_stage_id=lead.stage_id,
                    new_stage_id=lead.stage_id,
                    previous_status=previous_status,
                    new_status=target,
                    actor=actor,
                    notes=sanitize_text(notes) or None,
                )
            )

        logger.info(
            "lead.status_moved",
            extra=log_extra(
                "lead.status_moved",
                LogContext(lead_id=lead.id, actor=actor),
                previous_status=previous_status,
                new_status=target,
            ),
        )
        return lead

    def history(self, lead_id: int) -> list[LeadStageHistory]:
        self._require_lead(lead_id)
        return list(
            self.db.scalars(
                select(LeadStageHistory)
                .where(LeadStageHistory.lead_id == lead_id)
                .order_by(LeadStageHistory.id.desc())
            )
        )
