"""MongoDB-backed catalog store."""

import logging
import re
from typing import Any, Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from farmfresh.database.mongodb import MongoDB, document_to_model_data, mongodb
from farmfresh.errors import CatalogStoreError, InsufficientStockError, ProductNotFoundError
from farmfresh.models.product import Product, ProductCreate
from farmfresh.utils.helpers import utc_now

logger = logging.getLogger(__name__)

# Ties between several matching products go to the oldest listing.
_OLDEST_FIRST = [("createdAt", ASCENDING), ("_id", ASCENDING)]
_NEWEST_FIRST = [("createdAt", DESCENDING), ("_id", DESCENDING)]


def _to_product(document: dict[str, Any]) -> Product:
    return Product(**document_to_model_data(document))


def _object_id(product_id: str) -> Optional[ObjectId]:
    if not ObjectId.is_valid(product_id):
        return None
    return ObjectId(product_id)


class MongoCatalogStore:
    """Catalog store over the ``products`` collection."""

    def __init__(self, db: MongoDB) -> None:
        self._db = db

    async def _find_one(self, query: dict[str, Any]) -> Optional[Product]:
        try:
            document = await self._db.products.find_one(query, sort=_OLDEST_FIRST)
        except (PyMongoError, ConnectionError) as e:
            raise CatalogStoreError(f"Product lookup failed: {e}") from e
        return _to_product(document) if document else None

    async def find_by_id(self, product_id: str) -> Optional[Product]:
        oid = _object_id(product_id)
        if oid is None:
            logger.debug("Ignoring malformed product ID %r", product_id)
            return None
        return await self._find_one({"_id": oid})

    async def find_by_exact_name(self, name: str) -> Optional[Product]:
        return await self._find_one({"name": name})

    async def find_by_name_case_insensitive(self, name: str) -> Optional[Product]:
        pattern = f"^{re.escape(name)}$"
        return await self._find_one({"name": {"$regex": pattern, "$options": "i"}})

    async def find_by_name_substring(self, name: str) -> Optional[Product]:
        return await self._find_one({"name": {"$regex": re.escape(name), "$options": "i"}})

    async def _apply_increment(self, product_id: str, query: dict[str, Any], delta: int) -> Optional[Product]:
        try:
            document = await self._db.products.find_one_and_update(
                query,
                {"$inc": {"quantity": delta}, "$set": {"updatedAt": utc_now()}},
                return_document=ReturnDocument.AFTER,
            )
        except (PyMongoError, ConnectionError) as e:
            raise CatalogStoreError(f"Stock update failed for product {product_id}: {e}") from e
        return _to_product(document) if document else None

    async def decrement_quantity(self, product_id: str, amount: int) -> Product:
        """Decrement stock only if enough is on hand, in a single update."""
        oid = _object_id(product_id)
        if oid is None:
            raise ProductNotFoundError(product_id)

        product = await self._apply_increment(
            product_id, {"_id": oid, "quantity": {"$gte": amount}}, -amount
        )
        if product is not None:
            return product

        current = await self._find_one({"_id": oid})
        if current is None:
            raise ProductNotFoundError(product_id)
        raise InsufficientStockError(product_id, requested=amount, available=current.quantity)

    async def increment_quantity(self, product_id: str, amount: int) -> Product:
        oid = _object_id(product_id)
        if oid is None:
            raise ProductNotFoundError(product_id)

        product = await self._apply_increment(product_id, {"_id": oid}, amount)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    async def list_all(self) -> list[Product]:
        try:
            cursor = self._db.products.find({}).sort(_NEWEST_FIRST)
            return [_to_product(document) async for document in cursor]
        except (PyMongoError, ConnectionError) as e:
            raise CatalogStoreError(f"Product listing failed: {e}") from e

    async def list_in_stock(self, limit: int) -> list[Product]:
        try:
            cursor = self._db.products.find({"quantity": {"$gt": 0}}).sort(_NEWEST_FIRST).limit(limit)
            documents = await cursor.to_list(length=limit)
        except (PyMongoError, ConnectionError) as e:
            raise CatalogStoreError(f"Product listing failed: {e}") from e
        return [_to_product(document) for document in documents]

    async def create_product(self, farmer_id: str, product: ProductCreate) -> Product:
        now = utc_now()
        document = product.model_dump()
        document.update(farmer=farmer_id, createdAt=now, updatedAt=now)
        try:
            result = await self._db.products.insert_one(document)
        except (PyMongoError, ConnectionError) as e:
            raise CatalogStoreError(f"Failed to create product: {e}") from e

        logger.info("Product created: %s (%s)", product.name, result.inserted_id)
        return _to_product({"_id": result.inserted_id, **document})


# Global catalog store instance
catalog_store = MongoCatalogStore(mongodb)
