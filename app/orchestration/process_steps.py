"""Patient progress projection.

The current step is the furthest step reached by any single record in the
bundle. Records change independently and out of order, so the projection is
recomputed on every read and never stored.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from app.core.enums import ApprovalStatus, OrderStatus, ProcessStep, StepState

PROCESS_STEPS: list[ProcessStep] = list(ProcessStep)

_STEP_INDEX = {step: index for index, step in enumerate(PROCESS_STEPS)}

_ORDER_STEPS = {
    OrderStatus.PENDING.value: ProcessStep.ORDER,
    OrderStatus.PAID.value: ProcessStep.ORDER,
    OrderStatus.REGULATORY_APPROVED.value: ProcessStep.ORDER,
    OrderStatus.IMPORTING.value: ProcessStep.ORDER,
    OrderStatus.SHIPPED.value: ProcessStep.SHIPPING,
    OrderStatus.DELIVERED.value: ProcessStep.DELIVERED,
}


@dataclass
class RecordBundle:
    """Related records of one patient.

    Items only need a `status` attribute (approvals and orders); prescriptions
    count by presence. ORM rows and plain dataclasses both fit.
    """

    prescriptions: Sequence[Any] = field(default_factory=list)
    regulatory_approvals: Sequence[Any] = field(default_factory=list)
    orders: Sequence[Any] = field(default_factory=list)


@dataclass(frozen=True)
class StepView:
    step: ProcessStep
    state: StepState


def _status_of(record: Any) -> str | None:
    status = record.get("status") if isinstance(record, dict) else getattr(record, "status", None)
    return getattr(status, "value", status)


def _reached_steps(bundle: RecordBundle) -> Iterable[ProcessStep]:
    if bundle.prescriptions:
        yield ProcessStep.PRESCRIPTION
    for approval in bundle.regulatory_approvals:
        if _status_of(approval) == ApprovalStatus.APPROVED.value:
            # Approval granted: the patient may now place the order.
            yield ProcessStep.ORDER
        else:
            yield ProcessStep.REGULATORY
    for order in bundle.orders:
        step = _ORDER_STEPS.get(_status_of(order))
        if step is not None:
            yield step


def project(bundle: RecordBundle) -> int:
    """Return the index of the current step; an empty bundle yields consultation."""
    return max((_STEP_INDEX[step] for step in _reached_steps(bundle)), default=0)


def render(step_index: int) -> list[StepView]:
    if not 0 <= step_index < len(PROCESS_STEPS):
        raise ValueError(f"step index {step_index} is outside 0..{len(PROCESS_STEPS) - 1}")
    views = []
    for index, step in enumerate(PROCESS_STEPS):
        if index < step_index:
            state = StepState.COMPLETED
        elif index == step_index:
            state = StepState.CURRENT
        else:
            state = StepState.PENDING
        views.append(StepView(step=step, state=state))
    return views
