"""FastAPI routes for the order flow.

Thin adapters: parse the body, hand it to the lifecycle service, shape the
response. Validation, state rules and notifications live in the service.
"""

from fastapi import APIRouter, Depends, Request

from ordering.api.dependencies import get_lifecycle, read_json, require_admin_token, run_operation
from ordering.api.schemas import (
    MarkPaidResponse,
    OrderCreatedResponse,
    ProofResponse,
    TrackingResponse,
)
from ordering.order.lifecycle import OrderLifecycle

order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderCreatedResponse)
async def create_order(request: Request, lifecycle: OrderLifecycle = Depends(get_lifecycle)) -> OrderCreatedResponse:
    payload = await read_json(request)
    result = await run_operation(lifecycle.place_order, payload)
    return OrderCreatedResponse(
        id=result.order_id,
        order_code=result.data["order_code"],
        created_at=result.data["created_at"],
        status=result.data["status"],
        total=result.data["total"],
        total_flagged=result.data["total_flagged"] or False,
        payment_instructions=result.data["payment_instructions"],
        notifications=result.notifications_as_dicts(),
    )


@order_router.post(
    "/mark-paid",
    response_model=MarkPaidResponse,
    dependencies=[Depends(require_admin_token)],
)
async def mark_paid(request: Request, lifecycle: OrderLifecycle = Depends(get_lifecycle)) -> MarkPaidResponse:
    payload = await read_json(request)
    result = await run_operation(lifecycle.mark_paid, payload)
    return MarkPaidResponse(id=result.order_id, status=result.data["status"], changed=result.state_changed)


@order_router.post("/proof", response_model=ProofResponse)
async def upload_proof(request: Request, lifecycle: OrderLifecycle = Depends(get_lifecycle)) -> ProofResponse:
    payload = await read_json(request)
    result = await run_operation(lifecycle.attach_proof, payload)
    return ProofResponse(**result.data)


@order_router.post(
    "/tracking",
    response_model=TrackingResponse,
    dependencies=[Depends(require_admin_token)],
)
async def assign_tracking(request: Request, lifecycle: OrderLifecycle = Depends(get_lifecycle)) -> TrackingResponse:
    payload = await read_json(request)
    result = await run_operation(lifecycle.assign_tracking, payload)
    return TrackingResponse(
        id=result.order_id,
        status=result.data["status"],
        tracking_url=result.data["tracking_url"],
        notifications=result.notifications_as_dicts(),
    )
