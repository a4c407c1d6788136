"""Order Schemas — purchase, top-up and status-change payloads."""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from creditmart.core.domain_types import OrderStatus


class PurchaseRequest(BaseModel):
    """Buy quantity units of the product in the path."""
    quantity: int


class PurchaseResponse(BaseModel):
    order_id: int
    remaining_credits: int


class TopUpRequest(BaseModel):
    """Request credits; payment proof is opaque metadata."""
    amount: Decimal
    payment_method: str = Field(max_length=50)
    payment_reference: str | None = Field(None, max_length=500)


class TopUpResponse(BaseModel):
    order_id: int
    status: Literal["pending"] = "pending"


class StatusUpdate(BaseModel):
    status: OrderStatus


class StatusResponse(BaseModel):
    order_id: int
    status: OrderStatus


class OrderView(BaseModel):
    id: int
    user_id: int
    username: str | None = None
    product_id: int | None = None
    product_name: str | None = None
    type: str
    amount: Decimal
    quantity: int
    status: str
    payment_method: str | None = None
    payment_reference: str | None = None
    created_at: str
    updated_at: str
