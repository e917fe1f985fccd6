"""API request and response models."""

from typing import Optional

from pydantic import BaseModel, Field

from sweetbite.models.cart import CartItem
from sweetbite.models.order import Order
from sweetbite.models.product import Category


class AddToCartRequest(BaseModel):
    """Add-to-cart request model."""

    product_id: str = Field(..., description="Catalog product id")
    quantity: int = Field(default=1, ge=1, description="Quantity to add")

    model_config = {
        "json_schema_extra": {
            "example": {"product_id": "4f7c6f0e-2d6e-4a53-9d43-3f1f0c9a1b2e", "quantity": 2}
        }
    }


class UpdateCartItemRequest(BaseModel):
    """Set the quantity of a cart line. 0 removes it."""

    quantity: int = Field(..., ge=0)


class CartResponse(BaseModel):
    """Cart contents with derived totals."""

    items: list[CartItem] = Field(default_factory=list)
    item_count: int = Field(..., description="Sum of quantities")
    total: int = Field(..., description="Sum of price * quantity")
    total_display: str = Field(..., description="Formatted total, e.g. 'Rp 25.000'")


class OrderListResponse(BaseModel):
    """Order history, newest first."""

    orders: list[Order] = Field(default_factory=list)
    count: int
    item_count: int = Field(..., description="Total line items across all orders")


class ClearHistoryResponse(BaseModel):
    """Result of clearing the order history."""

    removed: int
    remaining: int


class CategoryCount(BaseModel):
    """Number of products in a category."""

    category: Category
    count: int


class PreferencesResponse(BaseModel):
    """UI flags held by the store."""

    is_dark_mode: bool
    is_loading: bool


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    services: dict[str, str]
