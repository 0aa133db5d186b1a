"""Catalog service for product browsing and listing."""

import logging
from typing import Optional

from farmfresh.config import get_settings
from farmfresh.database.catalog import catalog_store
from farmfresh.database.protocols import CatalogStore
from farmfresh.models.product import Product, ProductCreate

logger = logging.getLogger(__name__)
settings = get_settings()


class CatalogService:
    """Catalog service for handling product-related operations."""

    def __init__(self, catalog: CatalogStore) -> None:
        self.catalog = catalog

    async def create_product(self, farmer_id: str, product: ProductCreate) -> Product:
        """List a new product for a farmer."""
        created = await self.catalog.create_product(farmer_id, product)
        logger.info("Farmer %s listed %s x%d", farmer_id, created.name, created.quantity)
        return created

    async def get_product(self, product_id: str) -> Optional[Product]:
        """Get product by ID."""
        return await self.catalog.find_by_id(product_id)

    async def list_products(self) -> list[Product]:
        """Get every product, newest first."""
        return await self.catalog.list_all()

    async def trending(self, limit: Optional[int] = None) -> list[Product]:
        """Recently listed products that are in stock."""
        return await self.catalog.list_in_stock(limit or settings.trending_limit)


# Global catalog service instance
catalog_service = CatalogService(catalog_store)
