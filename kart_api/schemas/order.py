"""Order API schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class OrderCreate(BaseModel):
    """Payload for placing a new order."""

    name: str = Field(min_length=1)
    restaurant_name: str = Field(min_length=1)
    food_order_items: list[Any] | dict[str, Any] | str
    phone: str = Field(min_length=1)
    address: str = Field(min_length=1)
    location_url: str = Field(min_length=1)
    total_amount: Decimal = Field(ge=0, max_digits=10, decimal_places=2)


class OrderStatusUpdate(OrderCreate):
    """Full order snapshot as last read by the caller plus the requested status."""

    id: int
    order_status: str = Field(min_length=1)
    new_status: str = Field(min_length=1)


class OrdersByPhoneRequest(BaseModel):
    phone: str = Field(min_length=1)


class OrdersByDateRequest(BaseModel):
    """Calendar day (UTC) to list orders for."""

    order_date: date = Field(alias="date")


class OrderResponse(BaseModel):
    """Serialized order."""

    id: int
    name: str
    restaurant_name: str
    food_order_items: Any
    phone: str
    address: str
    location_url: str
    total_amount: float
    order_status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
