"""Catalog seeding script.

Creates the bakery products listed in a JSON file in the remote catalog.
The catalog assigns ids; records carrying an ``id`` have it ignored.

Usage:
    python -m scripts.seed_catalog                        # backend/data/products.json
    python -m scripts.seed_catalog --file other.json
    python -m scripts.seed_catalog --dry-run              # validate only
"""

import argparse
import asyncio
import logging
from pathlib import Path

from sweetbite.errors import ServiceError
from sweetbite.services.data_loader import DataLoader
from sweetbite.services.product_service import ProductService
from sweetbite.utils.helpers import format_price
from sweetbite.utils.logger import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

DEFAULT_FILE = Path(__file__).parent.parent / "data" / "products.json"


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the remote product catalog")
    parser.add_argument(
        "--file",
        type=Path,
        default=DEFAULT_FILE,
        help="JSON file with a 'products' array",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate the file without writing to the catalog",
    )
    return parser.parse_args()


async def seed_catalog(file_path: Path, *, dry_run: bool = False) -> int:
    """Create every valid product from ``file_path``. Returns how many were created."""
    products = DataLoader.load_products_from_file(file_path)
    if not products:
        logger.warning("No products found to seed")
        return 0

    if dry_run:
        for product in products:
            logger.info(
                "Would create %s %s (%s, %s, stock %d)",
                product.image,
                product.name,
                product.category.value,
                format_price(product.price),
                product.stock,
            )
        return 0

    created = 0
    async with ProductService() as service:
        for product in products:
            try:
                result = await service.create_product(product)
                created += 1
                logger.info("Created %s -> %s", product.name, result.id)
            except ServiceError as e:
                logger.error("Could not create %s: %s", product.name, e)

    logger.info("Seeded %d of %d products", created, len(products))
    return created


if __name__ == "__main__":
    args = _parse_args()
    asyncio.run(seed_catalog(args.file, dry_run=args.dry_run))
