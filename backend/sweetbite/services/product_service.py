"""Remote product catalog client.

Talks to a PostgREST-compatible endpoint (``{catalog_url}/rest/v1/{table}``),
which is what a Supabase project exposes. Every failure, whether transport,
HTTP status or an unparseable payload, is raised as ``ServiceError`` so callers
never see raw ``httpx`` exceptions.
"""

import asyncio
import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from sweetbite.config import Settings, get_settings
from sweetbite.errors import ServiceError, StockBatchError
from sweetbite.models.product import Product, ProductCreate, ProductUpdate, StockUpdate

logger = logging.getLogger(__name__)


class ProductService:
    """Async CRUD client for the remote product catalog."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize the client. Call ``connect()`` (or use ``async with``) before use."""
        self.settings = settings or get_settings()
        self.client: Optional[httpx.AsyncClient] = None
        self._transport = transport

    async def connect(self) -> None:
        """Open the HTTP connection pool."""
        if self.client is not None:
            return

        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if self.settings.catalog_api_key:
            headers["apikey"] = self.settings.catalog_api_key
            headers["Authorization"] = f"Bearer {self.settings.catalog_api_key}"

        self.client = httpx.AsyncClient(
            base_url=f"{self.settings.catalog_url}/rest/v1",
            headers=headers,
            timeout=self.settings.catalog_timeout,
            transport=self._transport,
        )
        logger.info("Catalog client ready: %s", self.settings.catalog_url)

    async def disconnect(self) -> None:
        """Close the HTTP connection pool."""
        if self.client is not None:
            await self.client.aclose()
            self.client = None
            logger.info("Catalog client closed")

    async def __aenter__(self) -> "ProductService":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.disconnect()

    @property
    def is_connected(self) -> bool:
        return self.client is not None

    async def _request(
        self,
        method: str,
        *,
        params: Optional[dict[str, str]] = None,
        json: Any = None,
        representation: bool = False,
    ) -> list[dict[str, Any]]:
        """Send a request to the products table and return the decoded rows."""
        if self.client is None:
            raise ServiceError("Catalog client not connected")

        headers = {"Prefer": "return=representation"} if representation else None
        path = f"/{self.settings.catalog_table}"

        try:
            response = await self.client.request(
                method, path, params=params, json=json, headers=headers
            )
        except httpx.HTTPError as exc:
            logger.error("Network error on %s %s: %s", method, path, exc)
            raise ServiceError(f"Network error on {method} {path}: {exc}") from exc

        if response.is_error:
            detail = response.text
            try:
                body = response.json()
                if isinstance(body, dict):
                    detail = body.get("message") or body.get("error") or detail
            except ValueError:
                pass
            logger.error("Catalog responded %s on %s %s: %s", response.status_code, method, path, detail)
            raise ServiceError(
                f"Catalog error {response.status_code}: {detail}",
                status_code=response.status_code,
            )

        if not response.content:
            return []

        try:
            payload = response.json()
        except ValueError as exc:
            raise ServiceError(f"Invalid JSON from catalog on {method} {path}") from exc

        if isinstance(payload, dict):
            payload = [payload]
        if not isinstance(payload, list):
            raise ServiceError(f"Unexpected payload from catalog on {method} {path}")
        return payload

    @staticmethod
    def _parse_product(row: dict[str, Any]) -> Product:
        try:
            return Product.model_validate(row)
        except ValidationError as exc:
            raise ServiceError(f"Invalid product record from catalog: {exc}") from exc

    @staticmethod
    def _single(rows: list[dict[str, Any]], product_id: str) -> dict[str, Any]:
        if not rows:
            raise ServiceError(f"Product not found: {product_id}", status_code=404)
        return rows[0]

    async def list_products(self) -> list[Product]:
        """List every product, newest first."""
        rows = await self._request(
            "GET", params={"select": "*", "order": "created_at.desc"}
        )
        products = [self._parse_product(row) for row in rows]
        logger.info("Fetched %d products from catalog", len(products))
        return products

    async def get_product(self, product_id: str) -> Optional[Product]:
        """Get a single product, or None if the catalog has no such id."""
        rows = await self._request("GET", params={"select": "*", "id": f"eq.{product_id}"})
        if not rows:
            return None
        return self._parse_product(rows[0])

    async def create_product(self, data: ProductCreate) -> Product:
        """Create a product. The catalog assigns its id."""
        rows = await self._request(
            "POST", json=[data.model_dump(mode="json")], representation=True
        )
        if not rows:
            raise ServiceError("Catalog did not return the created product")
        product = self._parse_product(rows[0])
        logger.info("Created product %s (%s)", product.id, product.name)
        return product

    async def update_product(self, product_id: str, patch: ProductUpdate) -> Product:
        """Apply a partial update and return the full updated record."""
        payload = patch.to_payload()
        if not payload:
            product = await self.get_product(product_id)
            if product is None:
                raise ServiceError(f"Product not found: {product_id}", status_code=404)
            return product

        rows = await self._request(
            "PATCH",
            params={"id": f"eq.{product_id}"},
            json=payload,
            representation=True,
        )
        return self._parse_product(self._single(rows, product_id))

    async def delete_product(self, product_id: str) -> None:
        """Delete a product."""
        rows = await self._request(
            "DELETE", params={"id": f"eq.{product_id}"}, representation=True
        )
        self._single(rows, product_id)
        logger.info("Deleted product %s", product_id)

    async def update_stock(self, product_id: str, new_stock: int) -> Product:
        """Overwrite the stock of a single product."""
        return await self.update_product(product_id, ProductUpdate(stock=new_stock))

    async def batch_update_stock(self, updates: list[StockUpdate]) -> None:
        """Apply independent stock writes concurrently.

        Raises:
            StockBatchError: if any write failed. Writes that succeeded stay
                applied and are listed on the error.
        """
        if not updates:
            return

        results = await asyncio.gather(
            *(self.update_stock(u.id, u.new_stock) for u in updates),
            return_exceptions=True,
        )

        succeeded: list[str] = []
        failed: dict[str, ServiceError] = {}
        for update, result in zip(updates, results):
            if isinstance(result, ServiceError):
                failed[update.id] = result
            elif isinstance(result, BaseException):
                raise result
            else:
                succeeded.append(update.id)

        if failed:
            logger.error(
                "Stock batch partially failed: %d succeeded, %d failed",
                len(succeeded),
                len(failed),
            )
            raise StockBatchError(succeeded, failed)

        logger.info("Updated stock for %d products", len(succeeded))
