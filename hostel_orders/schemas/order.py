"""Order API schemas."""

import datetime as dt
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

OrderStatus = Literal["PENDING", "ACCEPTED", "COMPLETED", "CANCELLED"]
OrderType = Literal["DELIVERY", "PICKUP"]


class OrderItemCreate(BaseModel):
    """Cart line submitted by the storefront."""

    food_id: int | None = None
    name: str = Field(min_length=1, max_length=255)
    quantity: int = Field(default=1, ge=1)
    unit_price: Decimal = Field(ge=0)
    notes: str | None = None


class OrderItemUpdate(OrderItemCreate):
    """Edit-form line; a missing ``id`` means the line is new."""

    id: int | None = None


class OrderCreate(BaseModel):
    """Storefront checkout payload."""

    customer: str | None = None
    contact_number: str | None = None
    email: str | None = None
    address: str | None = None
    date: dt.date | None = None
    time: dt.time | None = None
    order_type: OrderType = "DELIVERY"
    items: list[OrderItemCreate] | None = None


class OrderPatch(BaseModel):
    """Back-office order update; only fields that are sent are applied."""

    status: OrderStatus | None = None
    archived: bool | None = None
    archived_at: dt.datetime | None = None
    customer: str | None = None
    contact_number: str | None = None
    email: str | None = None
    address: str | None = None
    desired_at: dt.datetime | None = None
    items: list[OrderItemUpdate] | None = None


class OrderItemResponse(BaseModel):
    """Serialized order item."""

    id: int
    food_id: int | None
    name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    notes: str | None

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    """Serialized order."""

    id: int
    display_id: str
    status: OrderStatus
    order_type: OrderType
    total: Decimal
    archived: bool
    archived_at: dt.datetime | None
    customer: str | None
    contact_number: str | None
    email: str | None
    address: str | None
    desired_at: dt.datetime | None
    created_at: dt.datetime
    items: list[OrderItemResponse]

    model_config = ConfigDict(from_attributes=True)
