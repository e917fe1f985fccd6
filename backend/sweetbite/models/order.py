"""Order and order history data models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sweetbite.models.cart import CartItem
from sweetbite.utils.helpers import generate_uuid, utc_now


class OrderStatus(str, Enum):
    """Order lifecycle states. ``completed`` and ``cancelled`` are terminal."""

    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Order(BaseModel):
    """A placed order. Items and total are frozen at checkout."""

    id: str = Field(default_factory=generate_uuid)
    items: tuple[CartItem, ...] = Field(..., min_length=1, description="Cart snapshot at checkout")
    total: int = Field(..., ge=0, description="Sum of price * quantity at checkout")
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_cart(cls, cart: list[CartItem], created_at: datetime) -> "Order":
        """Snapshot a cart into a new pending order."""
        items = tuple(item.model_copy(deep=True) for item in cart)
        return cls(
            items=items,
            total=sum(item.subtotal for item in items),
            created_at=created_at,
        )

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)


class OrderUpdate(BaseModel):
    """Partial order patch, used mainly for status transitions."""

    status: Optional[OrderStatus] = None

    @field_validator("status")
    @classmethod
    def reject_null_status(cls, v: Optional[OrderStatus]) -> OrderStatus:
        if v is None:
            raise ValueError("status may be omitted but not null")
        return v

    model_config = {
        "json_schema_extra": {
            "example": {"status": "completed"}
        }
    }
