"""Canonical state transition tables for pipeline entities."""

from __future__ import annotations

from app.core.enums import LeadStatus, OrderStatus
from app.core.exceptions import InvalidTransitionError, TerminalStateError


class StateMachine:
    """Transition table with explicit terminal states.

    A state is terminal when it has no outgoing transitions.
    """

    def __init__(self, transitions: dict[str, set[str]]) -> None:
        self._transitions = transitions

    @property
    def states(self) -> set[str]:
        return set(self._transitions)

    def is_terminal(self, state: str) -> bool:
        return not self._transitions.get(state)

    def can_transition(self, current: str, target: str) -> bool:
        return target in self._transitions.get(current, set())

    def assert_transition(self, current: str, target: str) -> None:
        if current in self._transitions and self.is_terminal(current):
            raise TerminalStateError(f"State {current} is terminal; no further transitions are accepted")
        if not self.can_transition(current=current, target=target):
            raise InvalidTransitionError(f"Transition not allowed: {current} -> {target}")


_FULFILLMENT_PATH = [
    OrderStatus.PENDING,
    OrderStatus.PAID,
    OrderStatus.REGULATORY_APPROVED,
    OrderStatus.IMPORTING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
]


def _order_transitions() -> dict[str, set[str]]:
    transitions: dict[str, set[str]] = {}
    for current, following in zip(_FULFILLMENT_PATH, _FULFILLMENT_PATH[1:]):
        transitions[current.value] = {following.value, OrderStatus.CANCELLED.value}
    transitions[OrderStatus.DELIVERED.value] = set()
    transitions[OrderStatus.CANCELLED.value] = set()
    return transitions


ORDER_STATE_MACHINE = StateMachine(_order_transitions())

LEAD_STATUS_SEQUENCE = [status.value for status in LeadStatus]


def _lead_transitions() -> dict[str, set[str]]:
    # One step forward or backward; never skip ahead.
    transitions: dict[str, set[str]] = {}
    for index, status in enumerate(LEAD_STATUS_SEQUENCE):
        neighbours = set()
        if index > 0:
            neighbours.add(LEAD_STATUS_SEQUENCE[index - 1])
        if index < len(LEAD_STATUS_SEQUENCE) - 1:
            neighbours.add(LEAD_STATUS_SEQUENCE[index + 1])
        transitions[status] = neighbours
    return transitions


LEAD_STATE_MACHINE = StateMachine(_lead_transitions())
