"""Order Routes — top-ups, admin status changes and order listings.

Invariants:
    - Every route resolves the caller through get_actor
    - Domain errors propagate to the global handler unchanged
"""

from fastapi import APIRouter, Depends, status

from creditmart.api.dependencies import get_actor, get_workflow
from creditmart.core.authorization import Actor
from creditmart.core.domain_types import OrderId, OrderScope
from creditmart.schemas.orders import (
    OrderView, StatusResponse, StatusUpdate, TopUpRequest, TopUpResponse,
)
from creditmart.services.order_workflow import OrderWorkflow

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


@router.get("/mine", response_model=list[OrderView])
async def list_my_orders(
    actor: Actor = Depends(get_actor),
    workflow: OrderWorkflow = Depends(get_workflow),
):
    """The caller's orders, newest first."""
    return await workflow.list_orders(actor, OrderScope.MINE)


@router.get("", response_model=list[OrderView])
async def list_all_orders(
    actor: Actor = Depends(get_actor),
    workflow: OrderWorkflow = Depends(get_workflow),
):
    """Every order (admin only)."""
    return await workflow.list_orders(actor, OrderScope.ALL)


@router.post(
    "/top-ups", response_model=TopUpResponse,
    status_code=status.HTTP_201_CREATED,
)
async def request_top_up(
    body: TopUpRequest,
    actor: Actor = Depends(get_actor),
    workflow: OrderWorkflow = Depends(get_workflow),
):
    """Ask an admin to add credits after an off-platform payment."""
    receipt = await workflow.submit_top_up(
        actor, body.amount, body.payment_method, body.payment_reference,
    )
    return TopUpResponse(order_id=receipt.order_id)


@router.put("/{order_id}/status", response_model=StatusResponse)
async def update_order_status(
    order_id: int,
    body: StatusUpdate,
    actor: Actor = Depends(get_actor),
    workflow: OrderWorkflow = Depends(get_workflow),
):
    """Approve, reject or complete an order (admin only)."""
    change = await workflow.set_status(actor, OrderId(order_id), body.status)
    return StatusResponse(order_id=change.order_id, status=change.status)
