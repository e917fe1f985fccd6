"""Client-side store: catalog cache, cart and order history.

The Store is the single owner of the storefront state. It is created once at
startup and handed to whoever needs it; callers read through the properties
and change state only through the methods below.

Network-backed operations are remote-first: the ProductService call runs
first and local state is committed only if it succeeded. Every commit swaps
in a new immutable ``StoreState`` in one assignment.

Concurrent async operations are not serialized. Two checkouts racing on the
same product each write their own computed stock and the last write wins.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from sweetbite.config import Settings, get_settings
from sweetbite.errors import (
    CatalogLoadError,
    CatalogWriteError,
    OrderPlacementError,
    ServiceError,
    StockBatchError,
)
from sweetbite.models.cart import CartItem
from sweetbite.models.order import Order, OrderStatus, OrderUpdate
from sweetbite.models.product import (
    Category,
    Product,
    ProductCreate,
    ProductUpdate,
    StockUpdate,
)
from sweetbite.models.state import StoreState
from sweetbite.services.product_service import ProductService
from sweetbite.utils.helpers import generate_timestamp_id, utc_now

logger = logging.getLogger(__name__)


def _newest_first(products: list[Product]) -> list[Product]:
    """Order products by creation time, newest first; undated ones last."""
    dated = [p for p in products if p.created_at is not None]
    undated = [p for p in products if p.created_at is None]
    return sorted(dated, key=lambda p: p.created_at, reverse=True) + undated


class Store:
    """State container for the storefront."""

    def __init__(
        self,
        product_service: Optional[ProductService] = None,
        *,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Create an empty store.

        Args:
            product_service: Remote catalog client. Without one only the
                local-only operations are usable.
            settings: Application settings, defaults to ``get_settings()``.
            clock: Source of order timestamps.
        """
        self.product_service = product_service
        self.settings = settings or get_settings()
        self._clock = clock
        self._state = StoreState()

    # ── State access ──────────────────────────────────────────────────────

    def _commit(self, **changes: Any) -> None:
        self._state = self._state.model_copy(update=changes)

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def products(self) -> list[Product]:
        return list(self._state.products)

    @property
    def cart(self) -> list[CartItem]:
        return list(self._state.cart)

    @property
    def orders(self) -> list[Order]:
        return list(self._state.orders)

    @property
    def is_dark_mode(self) -> bool:
        return self._state.is_dark_mode

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def max_orders(self) -> int:
        return self.settings.max_orders

    def get_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self._state.products if p.id == product_id), None)

    def get_cart_item(self, item_id: str) -> Optional[CartItem]:
        return next((i for i in self._state.cart if i.id == item_id), None)

    def get_order(self, order_id: str) -> Optional[Order]:
        return next((o for o in self._state.orders if o.id == order_id), None)

    def search_products(self, query: str = "", category: Optional[Category] = None) -> list[Product]:
        """Filter the cached catalog by text (name or description) and category."""
        needle = query.strip().lower()
        return [
            p
            for p in self._state.products
            if (not needle or needle in p.name.lower() or needle in p.description.lower())
            and (category is None or p.category == category)
        ]

    def category_counts(self) -> dict[Category, int]:
        """Number of cached products per category."""
        counts = {category: 0 for category in Category}
        for product in self._state.products:
            counts[product.category] += 1
        return counts

    @property
    def cart_item_count(self) -> int:
        return sum(item.quantity for item in self._state.cart)

    @property
    def cart_total(self) -> int:
        return sum(item.subtotal for item in self._state.cart)

    def available_stock(self, product_id: str) -> int:
        """Stock still addable to the cart for a product."""
        line = self._find_line(product_id)
        in_cart = line.quantity if line else 0
        product = self.get_product(product_id) or (line.product if line else None)
        if product is None:
            return 0
        return max(0, product.stock - in_cart)

    def _find_line(self, product_id: str) -> Optional[CartItem]:
        return next((i for i in self._state.cart if i.product.id == product_id), None)

    # ── Catalog (remote-first) ────────────────────────────────────────────

    async def load_catalog(self) -> list[Product]:
        """Replace the catalog cache with the remote catalog.

        Raises:
            CatalogLoadError: listing failed; the cache is left as it was.
        """
        if self.product_service is None:
            raise CatalogLoadError("No catalog service configured")

        self._commit(is_loading=True)
        try:
            fetched = await self.product_service.list_products()
        except ServiceError as e:
            logger.error("Failed to fetch products: %s", e)
            self._commit(is_loading=False)
            raise CatalogLoadError() from e

        products = _newest_first(fetched)
        self._commit(products=tuple(products), is_loading=False)
        logger.info("Catalog loaded: %d products", len(products))
        return products

    async def create_product(self, data: ProductCreate) -> Product:
        """Create a product remotely, then prepend it to the cache."""
        if self.product_service is None:
            raise CatalogWriteError("create")
        try:
            product = await self.product_service.create_product(data)
        except ServiceError as e:
            logger.error("Failed to add product: %s", e)
            raise CatalogWriteError("create", status_code=e.status_code) from e

        self._commit(products=(product, *self._state.products))
        return product

    async def update_product(self, product_id: str, patch: ProductUpdate) -> Product:
        """Update a product remotely; the returned record replaces the cached one."""
        if self.product_service is None:
            raise CatalogWriteError("update", product_id)
        try:
            updated = await self.product_service.update_product(product_id, patch)
        except ServiceError as e:
            logger.error("Failed to update product %s: %s", product_id, e)
            raise CatalogWriteError("update", product_id, status_code=e.status_code) from e

        self._commit(
            products=tuple(updated if p.id == product_id else p for p in self._state.products)
        )
        return updated

    async def delete_product(self, product_id: str) -> None:
        """Delete a product remotely, then drop it from the cache."""
        if self.product_service is None:
            raise CatalogWriteError("delete", product_id)
        try:
            await self.product_service.delete_product(product_id)
        except ServiceError as e:
            logger.error("Failed to delete product %s: %s", product_id, e)
            raise CatalogWriteError("delete", product_id, status_code=e.status_code) from e

        self._commit(products=tuple(p for p in self._state.products if p.id != product_id))

    # ── Catalog (local-only fallback) ─────────────────────────────────────

    def add_product_local(self, data: ProductCreate) -> Product:
        """Add a product to the cache only. It is never sent to the catalog."""
        taken = {p.id for p in self._state.products}
        product = Product(
            **data.model_dump(),
            id=generate_timestamp_id(taken),
            created_at=self._clock(),
        )
        self._commit(products=(product, *self._state.products))
        return product

    def edit_product_local(self, product_id: str, patch: ProductUpdate) -> Optional[Product]:
        """Merge a patch into a cached product without touching the catalog."""
        current = self.get_product(product_id)
        if current is None:
            return None
        updated = current.model_copy(update=patch.model_dump(exclude_unset=True))
        self._commit(
            products=tuple(updated if p.id == product_id else p for p in self._state.products)
        )
        return updated

    def delete_product_local(self, product_id: str) -> bool:
        if self.get_product(product_id) is None:
            return False
        self._commit(products=tuple(p for p in self._state.products if p.id != product_id))
        return True

    # ── Cart ──────────────────────────────────────────────────────────────

    def add_to_cart(self, product: Product, quantity: int = 1) -> bool:
        """Add ``quantity`` of a product, merging with an existing line.

        The merged quantity may not exceed ``product.stock``. A rejected add
        leaves the cart untouched and returns False.
        """
        if quantity < 1:
            return False

        existing = self._find_line(product.id)
        new_quantity = (existing.quantity if existing else 0) + quantity
        if new_quantity > product.stock:
            logger.debug(
                "Rejected add of %d x %s: %d exceeds stock %d",
                quantity,
                product.id,
                new_quantity,
                product.stock,
            )
            return False

        if existing:
            merged = existing.model_copy(update={"product": product, "quantity": new_quantity})
            cart = tuple(merged if i.id == existing.id else i for i in self._state.cart)
        else:
            cart = (*self._state.cart, CartItem(product=product, quantity=quantity))

        self._commit(cart=cart)
        return True

    def update_cart_item(self, item_id: str, quantity: int) -> bool:
        """Set a line's quantity exactly; 0 removes the line.

        The same stock ceiling as ``add_to_cart`` applies, checked against
        the line's product snapshot.
        """
        if quantity == 0:
            return self.remove_from_cart(item_id)

        item = self.get_cart_item(item_id)
        if item is None or quantity < 0:
            return False
        if quantity > item.product.stock:
            logger.debug(
                "Rejected quantity %d for cart item %s: stock is %d",
                quantity,
                item_id,
                item.product.stock,
            )
            return False

        updated = item.model_copy(update={"quantity": quantity})
        self._commit(cart=tuple(updated if i.id == item_id else i for i in self._state.cart))
        return True

    def remove_from_cart(self, item_id: str) -> bool:
        if self.get_cart_item(item_id) is None:
            return False
        self._commit(cart=tuple(i for i in self._state.cart if i.id != item_id))
        return True

    def clear_cart(self) -> None:
        self._commit(cart=())

    # ── Checkout ──────────────────────────────────────────────────────────

    async def create_order_async(self) -> Optional[Order]:
        """Persist stock decrements remotely, then turn the cart into an order.

        Returns None when the cart is empty.

        Raises:
            OrderPlacementError: a stock write failed. Cart, orders and the
                cache are unchanged. When ``rollback_partial_checkout`` is on,
                writes that did land are reverted before raising.
        """
        cart = self._state.cart
        if not cart:
            return None
        if self.product_service is None:
            raise OrderPlacementError([item.product.id for item in cart])

        new_stock = {item.product.id: max(0, item.product.stock - item.quantity) for item in cart}
        updates = [StockUpdate(id=pid, new_stock=stock) for pid, stock in new_stock.items()]

        try:
            await self.product_service.batch_update_stock(updates)
        except StockBatchError as e:
            logger.error("Failed to create order: %s", e)
            rolled_back, rollback_failed = await self._rollback_stock(cart, e.succeeded)
            raise OrderPlacementError(list(e.failed), rolled_back, rollback_failed) from e
        except ServiceError as e:
            logger.error("Failed to create order: %s", e)
            raise OrderPlacementError(list(new_stock)) from e

        return self._place_order(cart, new_stock)

    async def _rollback_stock(
        self, cart: tuple[CartItem, ...], succeeded: list[str]
    ) -> tuple[list[str], list[str]]:
        """Write back the pre-checkout stock for updates that already landed."""
        if not succeeded or not self.settings.rollback_partial_checkout:
            return [], list(succeeded)

        previous = {item.product.id: item.product.stock for item in cart}
        restores = [StockUpdate(id=pid, new_stock=previous[pid]) for pid in succeeded]
        try:
            await self.product_service.batch_update_stock(restores)
        except StockBatchError as e:
            logger.error(
                "Stock rollback incomplete, %s will reconcile on next catalog load",
                ", ".join(e.failed),
            )
            return e.succeeded, list(e.failed)
        except ServiceError as e:
            logger.error("Stock rollback failed: %s", e)
            return [], list(succeeded)

        logger.info("Rolled back stock for %d products", len(restores))
        return list(succeeded), []

    def create_order(self) -> Optional[Order]:
        """Local-only checkout against the cached stock, with no network call."""
        cart = self._state.cart
        if not cart:
            return None

        new_stock = {}
        for item in cart:
            cached = self.get_product(item.product.id)
            base = cached.stock if cached else item.product.stock
            new_stock[item.product.id] = max(0, base - item.quantity)

        return self._place_order(cart, new_stock)

    def _place_order(self, cart: tuple[CartItem, ...], new_stock: dict[str, int]) -> Order:
        order = Order.from_cart(list(cart), created_at=self._clock())
        # Quantity added while a remote checkout was in flight stays in the cart
        ordered = {item.id: item.quantity for item in cart}
        remaining = []
        for item in self._state.cart:
            left = item.quantity - ordered.get(item.id, 0)
            if left > 0:
                remaining.append(item if left == item.quantity else item.model_copy(update={"quantity": left}))
        products = tuple(
            p.model_copy(update={"stock": new_stock[p.id]}) if p.id in new_stock else p
            for p in self._state.products
        )
        self._commit(
            orders=self._retain((*self._state.orders, order)),
            cart=tuple(remaining),
            products=products,
        )
        logger.info(
            "Order %s placed: %d items, total %d", order.id, order.item_count, order.total
        )
        return order

    # ── Order history ─────────────────────────────────────────────────────

    def _retain(self, orders: tuple[Order, ...]) -> tuple[Order, ...]:
        """Keep at most ``max_orders``, newest first when trimming.

        Eviction ignores status, so an old pending order can be dropped.
        """
        if len(orders) <= self.max_orders:
            return orders
        ranked = sorted(
            enumerate(orders), key=lambda pair: (pair[1].created_at, pair[0]), reverse=True
        )
        evicted = len(orders) - self.max_orders
        logger.info("Order history over limit, evicting %d oldest", evicted)
        return tuple(order for _, order in ranked[: self.max_orders])

    def update_order(self, order_id: str, updates: OrderUpdate) -> Optional[Order]:
        """Patch an order. Status transitions are not validated."""
        order = self.get_order(order_id)
        if order is None:
            return None
        updated = order.model_copy(update=updates.model_dump(exclude_unset=True))
        self._commit(orders=tuple(updated if o.id == order_id else o for o in self._state.orders))
        return updated

    def delete_order(self, order_id: str) -> bool:
        if self.get_order(order_id) is None:
            return False
        self._commit(orders=tuple(o for o in self._state.orders if o.id != order_id))
        return True

    def clear_order_history(self) -> int:
        """Drop completed and cancelled orders; pending ones stay. Returns how many were removed."""
        kept = tuple(o for o in self._state.orders if o.status == OrderStatus.PENDING)
        removed = len(self._state.orders) - len(kept)
        self._commit(orders=kept)
        return removed

    # ── UI flags ──────────────────────────────────────────────────────────

    def toggle_dark_mode(self) -> bool:
        self._commit(is_dark_mode=not self._state.is_dark_mode)
        return self._state.is_dark_mode
