"""Store state model."""

from pydantic import BaseModel, ConfigDict, Field

from sweetbite.models.cart import CartItem
from sweetbite.models.order import Order
from sweetbite.models.product import Product


class StoreState(BaseModel):
    """Immutable snapshot of everything the Store owns.

    The Store never mutates a snapshot in place: each operation stages a new
    one with ``model_copy(update=...)`` and swaps it in with a single
    assignment, so readers never observe a half-applied change.
    """

    products: tuple[Product, ...] = Field(
        default=(),
        description="Catalog cache, newest first"
    )
    cart: tuple[CartItem, ...] = Field(
        default=(),
        description="Cart lines, at most one per product id"
    )
    orders: tuple[Order, ...] = Field(
        default=(),
        description="Order history, capped by the retention limit"
    )
    is_dark_mode: bool = False
    is_loading: bool = False

    model_config = ConfigDict(frozen=True)
