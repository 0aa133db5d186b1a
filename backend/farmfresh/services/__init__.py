"""Services package."""

from farmfresh.services.catalog_loader import CatalogLoader
from farmfresh.services.catalog_service import CatalogService, catalog_service
from farmfresh.services.order_placement import OrderPlacementEngine
from farmfresh.services.order_service import OrderService, order_service
from farmfresh.services.product_resolution import (
    DEFAULT_TIERS,
    ProductResolver,
    Resolution,
    ResolutionTier,
)
from farmfresh.services.user_service import UserService, user_service

__all__ = [
    "CatalogLoader",
    "CatalogService",
    "catalog_service",
    "OrderPlacementEngine",
    "OrderService",
    "order_service",
    "DEFAULT_TIERS",
    "ProductResolver",
    "Resolution",
    "ResolutionTier",
    "UserService",
    "user_service",
]
