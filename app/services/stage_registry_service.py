"""Stage registry service: kanban stage definitions and their ordering.

Every command that reads the active list to compute positions locks the
registry row first, so two writers on one registry serialize while separate
registries proceed independently.
"""

from __future__ import annotations

import logging

from sqlalchemy import exists, select

from app.core.enums import StageColor
from app.core.exceptions import DuplicateSlugError, ImmutableSlugError, UnknownRegistryError, UnknownStageError, ValidationError
from app.core.logging import LogContext, log_extra
from app.models import Lead, LeadStageHistory, Stage, StageRegistry
from app.orchestration.reordering import PositionChange, compute_reorder
from app.services.base_service import BaseService
from app.utils.validators import normalize_slug, require_text, sanitize_text

logger = logging.getLogger(__name__)


def _parse_color(color: StageColor | str) -> str:
    try:
        return StageColor(color).value
    except ValueError as exc:
        allowed = ", ".join(c.value for c in StageColor)
        raise ValidationError(f"Unknown stage color {color!r}; expected one of: {allowed}") from exc


class StageRegistryService(BaseService):
    """Service for stage creation, reordering and archival."""

    def create_registry(self, name: str) -> StageRegistry:
        with self.atomic():
            registry = StageRegistry(name=require_text(name, "Registry name"))
            self.db.add(registry)
        logger.info("stage_registry.created", extra=log_extra("stage_registry.created", LogContext(registry_id=registry.id)))
        return registry

    def get_registry(self, registry_id: int) -> StageRegistry | None:
        return self.db.get(StageRegistry, registry_id)

    def get_stage(self, stage_id: int) -> Stage | None:
        return self.db.get(Stage, stage_id)

    def list_stages(self, registry_id: int) -> list[Stage]:
        """Active stages in display order; the list index is the dense position."""
        if self.get_registry(registry_id) is None:
            raise UnknownRegistryError(f"Stage registry {registry_id} not found")
        return self._active_stages(registry_id)

    def _lock_registry(self, registry_id: int) -> StageRegistry:
        registry = self.db.execute(
            select(StageRegistry).where(StageRegistry.id == registry_id).with_for_update()
        ).scalar_one_or_none()
        if registry is None:
            raise UnknownRegistryError(f"Stage registry {registry_id} not found")
        return registry

    def _active_stages(self, registry_id: int) -> list[Stage]:
        return list(
            self.db.scalars(
                select(Stage)
                .where(Stage.registry_id == registry_id, Stage.is_active.is_(True))
                .order_by(Stage.position, Stage.id)
            )
        )

    def _require_stage(self, stage_id: int) -> Stage:
        stage = self.get_stage(stage_id)
        if stage is None:
            raise UnknownStageError(f"Stage {stage_id} not found")
        return stage

    @staticmethod
    def _assert_slug_free(active: list[Stage], slug: str, exclude_id: int | None = None) -> None:
        if any(stage.slug == slug and stage.id != exclude_id for stage in active):
            raise DuplicateSlugError(f"Slug {slug!r} is already used by an active stage")

    def create_stage(
        self,
        registry_id: int,
        name: str,
        slug: str,
        color: StageColor | str = StageColor.BLUE,
        description: str | None = None,
        icon: str | None = None,
    ) -> Stage:
        clean_name = require_text(name, "Stage name", max_len=100)
        clean_slug = normalize_slug(slug)
        clean_color = _parse_color(color)

        with self.atomic():
            self._lock_registry(registry_id)
            active = self._active_stages(registry_id)
            self._assert_slug_free(active, clean_slug)
            # Close archive gaps first so the appended position cannot collide.
            for index, existing in enumerate(active):
                if existing.position != index:
                    existing.position = index
            stage = Stage(
                registry_id=registry_id,
                name=clean_name,
                slug=clean_slug,
                color=clean_color,
                description=sanitize_text(description) or None,
                icon=sanitize_text(icon, max_len=50) or "Circle",
                position=len(active),
                is_active=True,
            )
            self.db.add(stage)

        logger.info(
            "stage.created",
            extra=log_extra("stage.created", LogContext(registry_id=registry_id, stage_id=stage.id), slug=clean_slug),
        )
        return stage

    def reorder(self, stage_id: int, target_index: int) -> list[PositionChange]:
        """Move a stage to `target_index` and persist only the positions that changed."""
        stage = self._require_stage(stage_id)
        registry_id = stage.registry_id

        with self.atomic():
            self._lock_registry(registry_id)
            active = self._active_stages(registry_id)
            changes = compute_reorder(
                ordered_ids=[s.id for s in active],
                current_positions={s.id: s.position for s in active},
                stage_id=stage_id,
                target_index=target_index,
            )
            by_id = {s.id: s for s in active}
            for change in changes:
                by_id[change.stage_id].position = change.new_position

        logger.info(
            "stage.reordered",
            extra=log_extra(
                "stage.reordered",
                LogContext(registry_id=registry_id, stage_id=stage_id),
                target_index=target_index,
                changed=len(changes),
            ),
        )
        return changes

    def archive(self, stage_id: int) -> Stage:
        """Deactivate a stage; the other stages keep their stored positions."""
        stage = self._require_stage(stage_id)
        if not stage.is_active:
            return stage

        with self.atomic():
            self._lock_registry(stage.registry_id)
            stage.is_active = False

        logger.info(
            "stage.archived",
            extra=log_extra("stage.archived", LogContext(registry_id=stage.registry_id, stage_id=stage_id)),
        )
        return stage

    def update_stage(
        self,
        stage_id: int,
        name: str | None = None,
        slug: str | None = None,
        description: str | None = None,
        color: StageColor | str | None = None,
        icon: str | None = None,
    ) -> Stage:
        stage = self._require_stage(stage_id)

        with self.atomic():
            self._lock_registry(stage.registry_id)
            if slug is not None:
                new_slug = normalize_slug(slug)
                if new_slug != stage.slug:
                    if self._is_referenced(stage):
                        raise ImmutableSlugError(f"Stage {stage_id} is referenced by leads; its slug cannot change")
                    if stage.is_active:
                        self._assert_slug_free(self._active_stages(stage.registry_id), new_slug, exclude_id=stage.id)
                    stage.slug = new_slug
            if name is not None:
                stage.name = require_text(name, "Stage name", max_len=100)
            if description is not None:
                stage.description = sanitize_text(description) or None
            if color is not None:
                stage.color = _parse_color(color)
            if icon is not None:
                stage.icon = sanitize_text(icon, max_len=50) or stage.icon

        return stage

    def remove_stage(self, stage_id: int) -> str:
        """Hard-delete a stage no lead ever referenced; archive it otherwise."""
        stage = self._require_stage(stage_id)
        if self._is_referenced(stage):
            self.archive(stage_id)
            return "archived"

        with self.atomic():
            self._lock_registry(stage.registry_id)
            self.db.delete(stage)

        logger.info(
            "stage.deleted",
            extra=log_extra("stage.deleted", LogContext(registry_id=stage.registry_id, stage_id=stage_id)),
        )
        return "deleted"

    def _is_referenced(self, stage: Stage) -> bool:
        if stage.is_referenced:
            return True
        referenced = select(Lead.id).where(Lead.stage_id == stage.id)
        in_history = select(LeadStageHistory.id).where(
            (LeadStageHistory.previous_stage_id == stage.id) | (LeadStageHistory.new_stage_id == stage.id)
        )
        return bool(self.db.scalar(select(exists(referenced) | exists(in_history))))
