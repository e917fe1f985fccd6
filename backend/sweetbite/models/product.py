"""Product data models."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(str, Enum):
    """Bakery product categories."""

    CAKE = "Cake"
    COOKIES = "Cookies"
    PASTRY = "Pastry"
    BREAD = "Bread"
    DESSERT = "Dessert"


class ProductBase(BaseModel):
    """Fields shared by every product representation."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    price: int = Field(..., ge=0, description="Price in whole currency units (Rp)")
    image: str = Field(default="🍰", min_length=1, max_length=16, description="Emoji display token")
    category: Category
    stock: int = Field(..., ge=0, description="Authoritative available quantity")


class ProductCreate(ProductBase):
    """Product payload sent to the catalog on creation (no id yet)."""

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Red Velvet Cake",
                "description": "Soft red velvet sponge with cream cheese frosting.",
                "price": 250000,
                "image": "🎂",
                "category": "Cake",
                "stock": 5,
            }
        }
    }


class Product(ProductBase):
    """Product as stored in the remote catalog."""

    id: str = Field(..., min_length=1, description="Catalog-assigned identifier")
    created_at: Optional[datetime] = Field(None, description="Remote creation time")

    model_config = ConfigDict(frozen=True)


class ProductUpdate(BaseModel):
    """Partial product patch. Only fields that were set are sent."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    price: Optional[int] = Field(None, ge=0)
    image: Optional[str] = Field(None, min_length=1, max_length=16)
    category: Optional[Category] = None
    stock: Optional[int] = Field(None, ge=0)

    @field_validator("*")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        """Fields may be omitted but not set to null."""
        if v is None:
            raise ValueError("may be omitted but not null")
        return v

    def to_payload(self) -> dict:
        """Serialize only the explicitly set fields."""
        return self.model_dump(mode="json", exclude_unset=True)


class StockUpdate(BaseModel):
    """A single stock write issued during checkout."""

    id: str
    new_stock: int = Field(..., ge=0)
