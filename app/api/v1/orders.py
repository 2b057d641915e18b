"""Order pipeline endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from app.core.config import OUTBOX_MAX_BATCH_SIZE
from app.core.dependencies import get_order_service
from app.core.exceptions import UnknownOrderError
from app.schemas.orders import (
    DispatchRequest,
    DispatchResponse,
    OrderCreateRequest,
    OrderResponse,
    OrderStatusEventResponse,
    OrderTransitionRequest,
    TrackingAttachRequest,
)
from app.services.order_pipeline_service import OrderPipelineService

router = APIRouter(tags=["orders"])


@router.post("/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(payload: OrderCreateRequest, service: OrderPipelineService = Depends(get_order_service)) -> OrderResponse:
    order = service.create_order(
        patient_id=payload.patient_id,
        total_amount=payload.total_amount,
        affiliate_id=payload.affiliate_id,
    )
    return OrderResponse.model_validate(order)


@router.get("/orders/{order_id}", response_model=OrderResponse)
def get_order(order_id: int, service: OrderPipelineService = Depends(get_order_service)) -> OrderResponse:
    order = service.get_order(order_id)
    if order is None:
        raise UnknownOrderError(f"Order {order_id} not found")
    return OrderResponse.model_validate(order)


@router.post("/orders/{order_id}/transitions", response_model=OrderResponse)
def transition_order(
    order_id: int,
    payload: OrderTransitionRequest,
    service: OrderPipelineService = Depends(get_order_service),
) -> OrderResponse:
    return OrderResponse.model_validate(service.transition(order_id, payload.status, actor=payload.actor))


@router.put("/orders/{order_id}/tracking/{kind}", response_model=OrderResponse)
def attach_tracking(
    order_id: int,
    kind: str,
    payload: TrackingAttachRequest,
    service: OrderPipelineService = Depends(get_order_service),
) -> OrderResponse:
    return OrderResponse.model_validate(service.attach_tracking(order_id, kind, payload.code))


@router.get("/orders/{order_id}/events", response_model=list[OrderStatusEventResponse])
def order_events(
    order_id: int,
    service: OrderPipelineService = Depends(get_order_service),
) -> list[OrderStatusEventResponse]:
    return [OrderStatusEventResponse.model_validate(event) for event in service.events(order_id)]


@router.get("/outbox/order-events", response_model=list[OrderStatusEventResponse])
def pending_order_events(
    limit: int | None = Query(default=None, ge=1, le=OUTBOX_MAX_BATCH_SIZE),
    service: OrderPipelineService = Depends(get_order_service),
) -> list[OrderStatusEventResponse]:
    return [OrderStatusEventResponse.model_validate(event) for event in service.pending_events(limit)]


@router.post("/outbox/order-events/dispatched", response_model=DispatchResponse)
def mark_order_events_dispatched(
    payload: DispatchRequest,
    service: OrderPipelineService = Depends(get_order_service),
) -> DispatchResponse:
    return DispatchResponse(dispatched=service.mark_dispatched(payload.event_ids))
