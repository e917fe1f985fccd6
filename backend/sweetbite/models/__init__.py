"""Data models package."""

from sweetbite.models.cart import CartItem
from sweetbite.models.order import Order, OrderStatus, OrderUpdate
from sweetbite.models.product import (
    Category,
    Product,
    ProductBase,
    ProductCreate,
    ProductUpdate,
    StockUpdate,
)
from sweetbite.models.request import (
    AddToCartRequest,
    CartResponse,
    CategoryCount,
    ClearHistoryResponse,
    ErrorResponse,
    HealthResponse,
    OrderListResponse,
    PreferencesResponse,
    UpdateCartItemRequest,
)
from sweetbite.models.state import StoreState

__all__ = [
    # Product models
    "Category",
    "Product",
    "ProductBase",
    "ProductCreate",
    "ProductUpdate",
    "StockUpdate",
    # Cart models
    "CartItem",
    # Order models
    "Order",
    "OrderStatus",
    "OrderUpdate",
    # Store state model
    "StoreState",
    # Request/Response models
    "AddToCartRequest",
    "UpdateCartItemRequest",
    "CartResponse",
    "OrderListResponse",
    "ClearHistoryResponse",
    "CategoryCount",
    "PreferencesResponse",
    "HealthResponse",
    "ErrorResponse",
]
