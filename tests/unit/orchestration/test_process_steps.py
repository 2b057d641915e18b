from __future__ import annotations

from types import SimpleNamespace

import pytest

from app.core.enums import OrderStatus, ProcessStep, StepState
from app.orchestration.process_steps import PROCESS_STEPS, RecordBundle, project, render


def _rec(status=None):
    return SimpleNamespace(status=status)


def test_empty_bundle_is_consultation():
    assert PROCESS_STEPS[project(RecordBundle())] is ProcessStep.CONSULTATION


@pytest.mark.parametrize(
    ("bundle", "expected"),
    [
        (RecordBundle(prescriptions=[_rec()]), ProcessStep.PRESCRIPTION),
        (RecordBundle(regulatory_approvals=[_rec("pending")]), ProcessStep.REGULATORY),
        (RecordBundle(regulatory_approvals=[_rec("rejected")]), ProcessStep.REGULATORY),
        (RecordBundle(regulatory_approvals=[_rec("approved")]), ProcessStep.ORDER),
        (RecordBundle(orders=[_rec("paid")]), ProcessStep.ORDER),
        (RecordBundle(orders=[_rec("importing")]), ProcessStep.ORDER),
        (RecordBundle(orders=[_rec("shipped")]), ProcessStep.SHIPPING),
        (RecordBundle(orders=[_rec("delivered")]), ProcessStep.DELIVERED),
    ],
)
def test_single_record_mapping(bundle, expected):
    assert PROCESS_STEPS[project(bundle)] is expected


def test_furthest_record_wins_regardless_of_arrival_order():
    bundle = RecordBundle(
        prescriptions=[_rec()],
        regulatory_approvals=[_rec("submitted")],
        orders=[_rec("shipped"), _rec("pending")],
    )
    assert PROCESS_STEPS[project(bundle)] is ProcessStep.SHIPPING


def test_cancelled_orders_contribute_nothing():
    assert project(RecordBundle(orders=[_rec("cancelled")])) == 0
    assert PROCESS_STEPS[project(RecordBundle(prescriptions=[_rec()], orders=[_rec("cancelled")]))] is (
        ProcessStep.PRESCRIPTION
    )


def test_adding_records_never_moves_backward():
    bundle = RecordBundle(prescriptions=[_rec()], orders=[_rec("shipped")])
    before = project(bundle)
    bundle.regulatory_approvals = [_rec("pending")]
    assert project(bundle) >= before


def test_accepts_dicts_and_enum_statuses():
    bundle = RecordBundle(orders=[{"status": OrderStatus.DELIVERED}])
    assert PROCESS_STEPS[project(bundle)] is ProcessStep.DELIVERED


def test_render_marks_completed_current_pending():
    states = [view.state for view in render(3)]
    assert states == [
        StepState.COMPLETED,
        StepState.COMPLETED,
        StepState.COMPLETED,
        StepState.CURRENT,
        StepState.PENDING,
        StepState.PENDING,
    ]
    assert [view.step for view in render(0)] == PROCESS_STEPS


def test_render_rejects_out_of_range_index():
    with pytest.raises(ValueError):
        render(len(PROCESS_STEPS))
