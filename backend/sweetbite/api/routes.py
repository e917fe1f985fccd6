"""API routes for the storefront.

Routes are thin: they resolve ids, call the Store and shape the response.
Store errors are translated to HTTP responses by the handlers in
``sweetbite.main``.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from sweetbite.config import get_settings
from sweetbite.models.cart import CartItem
from sweetbite.models.order import Order, OrderUpdate
from sweetbite.models.product import Category, Product, ProductCreate, ProductUpdate
from sweetbite.models.request import (
    AddToCartRequest,
    CartResponse,
    CategoryCount,
    ClearHistoryResponse,
    HealthResponse,
    OrderListResponse,
    PreferencesResponse,
    UpdateCartItemRequest,
)
from sweetbite.services.store import Store
from sweetbite.utils.helpers import format_price

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix=settings.api_prefix)


def get_store(request: Request) -> Store:
    """Resolve the Store created at application startup."""
    store: Optional[Store] = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Store not initialized",
        )
    return store


def _cart_response(store: Store) -> CartResponse:
    return CartResponse(
        items=store.cart,
        item_count=store.cart_item_count,
        total=store.cart_total,
        total_display=format_price(store.cart_total),
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(store: Store = Depends(get_store)) -> HealthResponse:
    """Health check endpoint."""
    if store.product_service is None:
        catalog_status = "not_configured"
    elif store.product_service.is_connected:
        catalog_status = "connected"
    else:
        catalog_status = "disconnected"

    return HealthResponse(
        status="healthy" if catalog_status == "connected" else "degraded",
        version=settings.app_version,
        services={"catalog": catalog_status},
    )


# ── Products ───────────────────────────────────────────────────────────────

@router.get("/products", response_model=list[Product])
async def list_products(
    query: str = "",
    category: Optional[Category] = None,
    store: Store = Depends(get_store),
) -> list[Product]:
    """List cached products, optionally filtered by text and category."""
    return store.search_products(query, category)


@router.get("/products/categories", response_model=list[CategoryCount])
async def category_counts(store: Store = Depends(get_store)) -> list[CategoryCount]:
    """Count cached products per category."""
    return [
        CategoryCount(category=category, count=count)
        for category, count in store.category_counts().items()
    ]


@router.post("/products/refresh", response_model=list[Product])
async def refresh_products(store: Store = Depends(get_store)) -> list[Product]:
    """Reload the catalog cache from the remote catalog."""
    return await store.load_catalog()


@router.get("/products/{product_id}", response_model=Product)
async def get_product(product_id: str, store: Store = Depends(get_store)) -> Product:
    """Get a cached product by id."""
    product = store.get_product(product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product not found: {product_id}",
        )
    return product


@router.post("/products", response_model=Product, status_code=status.HTTP_201_CREATED)
async def create_product(data: ProductCreate, store: Store = Depends(get_store)) -> Product:
    """Create a product in the catalog."""
    return await store.create_product(data)


@router.patch("/products/{product_id}", response_model=Product)
async def update_product(
    product_id: str, patch: ProductUpdate, store: Store = Depends(get_store)
) -> Product:
    """Update a product in the catalog."""
    return await store.update_product(product_id, patch)


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: str, store: Store = Depends(get_store)) -> Response:
    """Delete a product from the catalog."""
    await store.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── Cart ───────────────────────────────────────────────────────────────────

@router.get("/cart", response_model=CartResponse)
async def get_cart(store: Store = Depends(get_store)) -> CartResponse:
    """Get the cart with totals."""
    return _cart_response(store)


@router.post("/cart/items", response_model=CartResponse)
async def add_to_cart(request: AddToCartRequest, store: Store = Depends(get_store)) -> CartResponse:
    """Add a product to the cart, merging with an existing line."""
    product = store.get_product(request.product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product not found: {request.product_id}",
        )

    if not store.add_to_cart(product, request.quantity):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Only {store.available_stock(product.id)} more of {product.name} available",
        )
    return _cart_response(store)


@router.patch("/cart/items/{item_id}", response_model=CartResponse)
async def update_cart_item(
    item_id: str, request: UpdateCartItemRequest, store: Store = Depends(get_store)
) -> CartResponse:
    """Set the quantity of a cart line; 0 removes it."""
    item: Optional[CartItem] = store.get_cart_item(item_id)
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Cart item not found: {item_id}",
        )

    if not store.update_cart_item(item_id, request.quantity):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Quantity exceeds stock of {item.product.stock}",
        )
    return _cart_response(store)


@router.delete("/cart/items/{item_id}", response_model=CartResponse)
async def remove_from_cart(item_id: str, store: Store = Depends(get_store)) -> CartResponse:
    """Remove a line from the cart."""
    store.remove_from_cart(item_id)
    return _cart_response(store)


@router.delete("/cart", response_model=CartResponse)
async def clear_cart(store: Store = Depends(get_store)) -> CartResponse:
    """Empty the cart."""
    store.clear_cart()
    return _cart_response(store)


# ── Orders ─────────────────────────────────────────────────────────────────

@router.post(
    "/orders",
    response_model=Order,
    status_code=status.HTTP_201_CREATED,
    responses={204: {"description": "Cart was empty, nothing to order"}},
)
async def create_order(offline: bool = False, store: Store = Depends(get_store)):
    """Check out the cart.

    With ``offline=true`` the order is placed against cached stock only and
    the catalog is not touched.
    """
    order = store.create_order() if offline else await store.create_order_async()
    if order is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return order


@router.get("/orders", response_model=OrderListResponse)
async def list_orders(store: Store = Depends(get_store)) -> OrderListResponse:
    """Order history, newest first."""
    orders = sorted(store.orders, key=lambda o: o.created_at, reverse=True)
    return OrderListResponse(
        orders=orders,
        count=len(orders),
        item_count=sum(len(o.items) for o in orders),
    )


@router.get("/orders/{order_id}", response_model=Order)
async def get_order(order_id: str, store: Store = Depends(get_store)) -> Order:
    """Get an order by id."""
    order = store.get_order(order_id)
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Order not found: {order_id}",
        )
    return order


@router.patch("/orders/{order_id}", response_model=Order)
async def update_order(
    order_id: str, updates: OrderUpdate, store: Store = Depends(get_store)
) -> Order:
    """Patch an order, typically to complete or cancel it."""
    order = store.update_order(order_id, updates)
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Order not found: {order_id}",
        )
    return order


@router.delete("/orders/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(order_id: str, store: Store = Depends(get_store)) -> Response:
    """Delete a single order regardless of status."""
    if not store.delete_order(order_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Order not found: {order_id}",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/orders", response_model=ClearHistoryResponse)
async def clear_order_history(store: Store = Depends(get_store)) -> ClearHistoryResponse:
    """Remove completed and cancelled orders. Pending orders are kept."""
    removed = store.clear_order_history()
    return ClearHistoryResponse(removed=removed, remaining=len(store.orders))


# ── Preferences ────────────────────────────────────────────────────────────

@router.get("/preferences", response_model=PreferencesResponse)
async def get_preferences(store: Store = Depends(get_store)) -> PreferencesResponse:
    return PreferencesResponse(is_dark_mode=store.is_dark_mode, is_loading=store.is_loading)


@router.post("/preferences/dark-mode/toggle", response_model=PreferencesResponse)
async def toggle_dark_mode(store: Store = Depends(get_store)) -> PreferencesResponse:
    store.toggle_dark_mode()
    return PreferencesResponse(is_dark_mode=store.is_dark_mode, is_loading=store.is_loading)
