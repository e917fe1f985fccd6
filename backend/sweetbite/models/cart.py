"""Cart data models."""

from pydantic import BaseModel, ConfigDict, Field

from sweetbite.models.product import Product
from sweetbite.utils.helpers import generate_uuid


class CartItem(BaseModel):
    """A cart line: a product snapshot and the quantity wanted.

    ``id`` is local to the cart and independent of ``product.id``.
    """

    id: str = Field(default_factory=generate_uuid)
    product: Product
    quantity: int = Field(..., ge=1)

    model_config = ConfigDict(frozen=True)

    @property
    def subtotal(self) -> int:
        return self.product.price * self.quantity
