"""Pytest fixtures for SweetBite tests."""

from datetime import UTC, datetime, timedelta
from itertools import count

import pytest

from sweetbite.config import Settings
from sweetbite.errors import ServiceError
from sweetbite.models.product import Category, Product, ProductCreate, ProductUpdate
from sweetbite.services.product_service import ProductService
from sweetbite.services.store import Store


class FakeClock:
    """Clock that advances one minute per call."""

    def __init__(self, start: datetime = datetime(2025, 1, 1, 8, 0, tzinfo=UTC)):
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(minutes=1)
        return self.now


class FakeProductService(ProductService):
    """In-memory catalog with failure injection.

    Only the CRUD primitives are replaced; ``batch_update_stock`` is the real
    implementation running on top of them.
    """

    def __init__(self, settings: Settings, products=()):
        super().__init__(settings)
        self.rows = {p.id: p for p in products}
        self.fail_on: set[str] = set()
        # product ids, or (product id, new stock) pairs, whose stock write fails
        self.fail_stock_for: set = set()
        self.stock_writes: list[tuple[str, int]] = []
        self.calls: list[str] = []
        self._ids = count(100)

    @property
    def is_connected(self) -> bool:
        return True

    def _maybe_fail(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise ServiceError(f"{operation} failed", status_code=500)

    async def list_products(self):
        self._maybe_fail("list")
        return sorted(self.rows.values(), key=lambda p: p.created_at, reverse=True)

    async def create_product(self, data: ProductCreate) -> Product:
        self._maybe_fail("create")
        product = Product(
            **data.model_dump(),
            id=f"p-{next(self._ids)}",
            created_at=datetime.now(UTC),
        )
        self.rows[product.id] = product
        return product

    async def update_product(self, product_id: str, patch: ProductUpdate) -> Product:
        self._maybe_fail("update")
        if product_id not in self.rows:
            raise ServiceError(f"Product not found: {product_id}", status_code=404)
        updated = self.rows[product_id].model_copy(update=patch.model_dump(exclude_unset=True))
        self.rows[product_id] = updated
        return updated

    async def delete_product(self, product_id: str) -> None:
        self._maybe_fail("delete")
        if self.rows.pop(product_id, None) is None:
            raise ServiceError(f"Product not found: {product_id}", status_code=404)

    async def update_stock(self, product_id: str, new_stock: int) -> Product:
        if product_id in self.fail_stock_for or (product_id, new_stock) in self.fail_stock_for:
            raise ServiceError(f"stock write failed for {product_id}", status_code=500)
        self.stock_writes.append((product_id, new_stock))
        return await super().update_stock(product_id, new_stock)


@pytest.fixture
def settings():
    """Settings isolated from the environment's .env values that matter here."""
    return Settings(max_orders=20, rollback_partial_checkout=True, log_format="text")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_product():
    """Factory for catalog products with sequential creation times."""
    ids = count(1)
    base = datetime(2024, 6, 1, tzinfo=UTC)

    def _make(stock: int = 10, price: int = 20000, **overrides) -> Product:
        n = next(ids)
        fields = {
            "id": f"P{n}",
            "name": f"Product {n}",
            "description": "Freshly baked",
            "price": price,
            "image": "🍰",
            "category": Category.CAKE,
            "stock": stock,
            "created_at": base + timedelta(days=n),
        }
        fields.update(overrides)
        return Product(**fields)

    return _make


@pytest.fixture
def catalog(make_product):
    """Three products: P1 (stock 5), P2 (stock 2), P3 (stock 10)."""
    return [
        make_product(stock=5, price=25000, name="Red Velvet Cake", category=Category.CAKE),
        make_product(stock=2, price=45000, name="Choco Cookies", category=Category.COOKIES),
        make_product(stock=10, price=28000, name="Butter Croissant", category=Category.PASTRY),
    ]


@pytest.fixture
def service(settings, catalog):
    return FakeProductService(settings, catalog)


@pytest.fixture
def store(service, settings, clock):
    return Store(service, settings=settings, clock=clock)
