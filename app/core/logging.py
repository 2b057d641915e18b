"""Structured logging helpers shared by the services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class LogContext:
    """Normalized context fields expected in structured logs."""

    registry_id: int | None = None
    stage_id: int | None = None
    lead_id: int | None = None
    order_id: int | None = None
    affiliate_id: int | None = None
    actor: str | None = None


def log_extra(event: str, context: LogContext | None = None, **fields: Any) -> dict[str, Any]:
    """Build the `extra=` payload for a structured log call.

    Context fields left as None are dropped so log lines only carry what applies.
    """
    payload: dict[str, Any] = {"event": event}
    if context is not None:
        payload.update({key: value for key, value in context.__dict__.items() if value is not None})
    payload.update(fields)
    return payload
