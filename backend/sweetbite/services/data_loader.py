"""Data loader for importing bakery products from JSON files."""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from sweetbite.models.product import Category, ProductCreate

logger = logging.getLogger(__name__)

# Indonesian category labels used by the storefront UI
CATEGORY_ALIASES = {
    "kue": Category.CAKE,
    "kukis": Category.COOKIES,
    "roti": Category.BREAD,
}


class DataLoader:
    """Service for loading seed products from JSON files."""

    @staticmethod
    def load_json_file(file_path: str | Path) -> list[dict[str, Any]]:
        """Load records from a JSON file.

        Supports both ``{"products": [...]}`` and a flat array.
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        if file_path.suffix.lower() != ".json":
            raise ValueError(f"File must be a JSON file: {file_path}")

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error("Invalid JSON in file %s: %s", file_path, e)
            raise

        if isinstance(data, dict) and "products" in data:
            data = data["products"]
        if not isinstance(data, list):
            raise ValueError("JSON must contain a 'products' array or be an array")

        logger.info("Loaded %d records from %s", len(data), file_path)
        return data

    @staticmethod
    def normalize_record(raw: dict[str, Any]) -> dict[str, Any]:
        """Map a raw record onto ProductCreate fields.

        Accepts category labels case-insensitively, including the Indonesian
        names shown in the app, and drops catalog-managed fields.
        """
        record = {k: v for k, v in raw.items() if k not in ("id", "created_at")}
        category = str(record.get("category", "")).strip()
        by_value = {c.value.lower(): c for c in Category}
        record["category"] = (
            by_value.get(category.lower()) or CATEGORY_ALIASES.get(category.lower()) or category
        )
        return record

    @staticmethod
    def validate_and_parse_products(data: list[dict[str, Any]]) -> list[ProductCreate]:
        """Validate raw records, skipping the invalid ones."""
        products: list[ProductCreate] = []
        errors = 0

        for idx, item in enumerate(data):
            try:
                products.append(ProductCreate(**DataLoader.normalize_record(item)))
            except (ValidationError, TypeError, AttributeError) as e:
                errors += 1
                logger.warning("Invalid product data at index %d: %s", idx, e)

        if errors:
            logger.warning("Failed to parse %d out of %d records", errors, len(data))

        logger.info("Successfully validated %d products", len(products))
        return products

    @staticmethod
    def load_products_from_file(file_path: str | Path) -> list[ProductCreate]:
        """Load and validate products from a single file."""
        return DataLoader.validate_and_parse_products(DataLoader.load_json_file(file_path))
