"""Resolution of client-supplied product references to catalog products.

Clients send a product ID, a display name, or both; the name may be stale
(cached UI state) or differ in case. Resolution walks an ordered chain of
tiers and stops at the first one that finds a product:

  1. ``id``                    exact lookup by product ID
  2. ``exact_name``            case-sensitive name equality
  3. ``case_insensitive_name`` name equality ignoring case
  4. ``name_substring``        case-insensitive substring

Each tier is a plain ``ResolutionTier`` so the chain can be reordered,
shortened or extended, and each lookup tested on its own.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Sequence

from farmfresh.database.protocols import CatalogStore
from farmfresh.models.placement import ProductReference
from farmfresh.models.product import Product

logger = logging.getLogger(__name__)

TierLookup = Callable[[CatalogStore, ProductReference], Awaitable[Optional[Product]]]


@dataclass(frozen=True)
class ResolutionTier:
    """One step of the resolution chain."""

    name: str
    lookup: TierLookup


@dataclass(frozen=True)
class Resolution:
    """A resolved reference and the tier that resolved it."""

    product: Product
    tier: str


async def lookup_by_id(catalog: CatalogStore, reference: ProductReference) -> Optional[Product]:
    if not reference.productId:
        return None
    return await catalog.find_by_id(reference.productId)


async def lookup_by_exact_name(catalog: CatalogStore, reference: ProductReference) -> Optional[Product]:
    if not reference.productName:
        return None
    return await catalog.find_by_exact_name(reference.productName)


async def lookup_by_case_insensitive_name(
    catalog: CatalogStore, reference: ProductReference
) -> Optional[Product]:
    if not reference.productName:
        return None
    return await catalog.find_by_name_case_insensitive(reference.productName)


async def lookup_by_name_substring(catalog: CatalogStore, reference: ProductReference) -> Optional[Product]:
    if not reference.productName:
        return None
    return await catalog.find_by_name_substring(reference.productName)


DEFAULT_TIERS: tuple[ResolutionTier, ...] = (
    ResolutionTier("id", lookup_by_id),
    ResolutionTier("exact_name", lookup_by_exact_name),
    ResolutionTier("case_insensitive_name", lookup_by_case_insensitive_name),
    ResolutionTier("name_substring", lookup_by_name_substring),
)


class ProductResolver:
    """Walks the resolution tiers against a catalog store."""

    def __init__(self, catalog: CatalogStore, tiers: Sequence[ResolutionTier] = DEFAULT_TIERS) -> None:
        if not tiers:
            raise ValueError("At least one resolution tier is required")
        self.catalog = catalog
        self.tiers = tuple(tiers)

    async def resolve(self, reference: ProductReference) -> Optional[Resolution]:
        """Resolve a reference, or return None when no tier matches."""
        for tier in self.tiers:
            product = await tier.lookup(self.catalog, reference)
            if product is not None:
                logger.info(
                    "Resolved product reference via %s",
                    tier.name,
                    extra={
                        "tier": tier.name,
                        "requested_id": reference.productId,
                        "requested_name": reference.productName,
                        "product_id": product.id,
                        "product_name": product.name,
                    },
                )
                return Resolution(product=product, tier=tier.name)

        logger.info(
            "No resolution tier matched product reference",
            extra={"requested_id": reference.productId, "requested_name": reference.productName},
        )
        return None
