"""Minimal-diff reordering for positioned items such as kanban stages."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from app.core.exceptions import IndexOutOfRangeError, UnknownStageError


@dataclass(frozen=True)
class PositionChange:
    stage_id: int
    new_position: int


def compute_reorder(
    ordered_ids: Sequence[int],
    current_positions: dict[int, int],
    stage_id: int,
    target_index: int,
) -> list[PositionChange]:
    """Move `stage_id` to `target_index` and return only the rows that change.

    `ordered_ids` is the active list in display order; `current_positions` holds
    the stored position of each id. Stored positions may have gaps left behind
    by archived stages; walking the new list closes them.
    """
    ids = list(ordered_ids)
    if stage_id not in ids:
        raise UnknownStageError(f"Stage {stage_id} is not an active stage of this registry")
    if not 0 <= target_index < len(ids):
        raise IndexOutOfRangeError(
            f"Target index {target_index} is outside 0..{len(ids) - 1}"
        )

    ids.remove(stage_id)
    ids.insert(target_index, stage_id)

    return [
        PositionChange(stage_id=item_id, new_position=index)
        for index, item_id in enumerate(ids)
        if current_positions.get(item_id) != index
    ]
