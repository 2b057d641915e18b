"""Pydantic schema package for API contracts."""

from app.schemas.affiliates import (
    AffiliateEnrollRequest,
    AffiliateMetricsResponse,
    AffiliateResponse,
    ClickTrackRequest,
    PurchaseTrackRequest,
    RegistrationTrackRequest,
    TrackResponse,
)
from app.schemas.common import ErrorEnvelope
from app.schemas.leads import (
    LeadCreateRequest,
    LeadHistoryResponse,
    LeadResponse,
    LeadStageMoveRequest,
    LeadStatusMoveRequest,
)
from app.schemas.orders import (
    DispatchRequest,
    DispatchResponse,
    OrderCreateRequest,
    OrderResponse,
    OrderStatusEventResponse,
    OrderTransitionRequest,
    TrackingAttachRequest,
)
from app.schemas.process import ProcessBundleRequest, ProcessProjectionResponse, ProcessRecord, StepViewResponse
from app.schemas.stages import (
    PositionChangeResponse,
    RegistryCreateRequest,
    RegistryResponse,
    StageCreateRequest,
    StageRemovalResponse,
    StageReorderRequest,
    StageResponse,
    StageUpdateRequest,
)

__all__ = [
    "AffiliateEnrollRequest",
    "AffiliateMetricsResponse",
    "AffiliateResponse",
    "ClickTrackRequest",
    "DispatchRequest",
    "DispatchResponse",
    "ErrorEnvelope",
    "LeadCreateRequest",
    "LeadHistoryResponse",
    "LeadResponse",
    "LeadStageMoveRequest",
    "LeadStatusMoveRequest",
    "OrderCreateRequest",
    "OrderResponse",
    "OrderStatusEventResponse",
    "OrderTransitionRequest",
    "PositionChangeResponse",
    "ProcessBundleRequest",
    "ProcessProjectionResponse",
    "ProcessRecord",
    "PurchaseTrackRequest",
    "RegistrationTrackRequest",
    "RegistryCreateRequest",
    "RegistryResponse",
    "StageCreateRequest",
    "StageRemovalResponse",
    "StageReorderRequest",
    "StageResponse",
    "StageUpdateRequest",
    "StepViewResponse",
    "TrackResponse",
]
