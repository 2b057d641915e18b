"""Shared error mapping for API v1 route modules."""

from __future__ import annotations

from app.core.exceptions import (
    DuplicateAffiliateCodeError,
    DuplicatePurchaseError,
    DuplicateSlugError,
    ImmutableSlugError,
    InvalidTransitionError,
    NotFoundError,
    PipelineError,
    TerminalStateError,
    ValidationError,
)

_CONFLICTS = (
    DuplicateSlugError,
    DuplicateAffiliateCodeError,
    DuplicatePurchaseError,
    ImmutableSlugError,
    InvalidTransitionError,
    TerminalStateError,
)


def map_pipeline_error(exc: PipelineError) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, _CONFLICTS):
        return 409
    if isinstance(exc, ValidationError):
        return 400
    return 500
