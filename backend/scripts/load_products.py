"""Product data loading script.

Loads product JSON files from backend/data/products/ into the catalog,
listed under the given farmer.

Usage:
    python -m scripts.load_products --farmer farmer_001
    python -m scripts.load_products --farmer farmer_001 --path data/products/organic_produce.json --clear
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from farmfresh.database.catalog import catalog_store
from farmfresh.database.mongodb import mongodb
from farmfresh.models.user import UserRole
from farmfresh.services.catalog_loader import CatalogLoader
from farmfresh.services.user_service import user_service
from farmfresh.utils.logger import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data" / "products"


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Load product data into the catalog")
    parser.add_argument("--farmer", required=True, help="userId of the farmer who owns the products")
    parser.add_argument(
        "--path",
        type=Path,
        default=DEFAULT_DATA_DIR,
        help="JSON file or directory of JSON files",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Delete the farmer's existing products before loading",
    )
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    return parser.parse_args()


async def load_products(farmer_id: str, path: Path, *, clear: bool = False) -> int:
    """Load products from JSON into the catalog. Returns the number inserted."""
    try:
        logger.info("Starting product data loading from %s", path)
        await mongodb.connect()

        farmer = await user_service.get_user(farmer_id)
        if farmer is None or farmer.role != UserRole.FARMER:
            logger.error("Farmer not found: %s (run scripts.init_db first)", farmer_id)
            return 0

        products = CatalogLoader.load_products(path)
        if not products:
            logger.warning("No products found to load")
            return 0

        should_clear = clear
        if not should_clear and sys.stdin.isatty():
            should_clear = input(f"Delete existing products of {farmer_id}? (y/n): ").lower() == "y"

        if should_clear:
            result = await mongodb.products.delete_many({"farmer": farmer_id})
            logger.info("Deleted %d existing products", result.deleted_count)

        for product in products:
            await catalog_store.create_product(farmer_id, product)

        logger.info("Product loading completed: %d products listed for %s", len(products), farmer_id)
        return len(products)

    except Exception as e:
        logger.error("Error loading products: %s", e)
        raise
    finally:
        await mongodb.disconnect()


if __name__ == "__main__":
    args = _parse_args()
    setup_logging("DEBUG" if args.verbose else None)
    asyncio.run(load_products(args.farmer, args.path, clear=args.clear))
