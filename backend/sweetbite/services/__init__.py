"""Services package."""

from sweetbite.services.data_loader import DataLoader
from sweetbite.services.product_service import ProductService
from sweetbite.services.store import Store

__all__ = [
    "DataLoader",
    "ProductService",
    "Store",
]
