"""MongoDB-backed order ledger."""

import logging
from typing import Any, Optional

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from farmfresh.database.mongodb import MongoDB, document_to_model_data, mongodb
from farmfresh.errors import DuplicateOrderNumber, PersistenceFailure
from farmfresh.models.order import Order, OrderCreate, OrderStatus
from farmfresh.utils.helpers import utc_now

logger = logging.getLogger(__name__)

_NEWEST_FIRST = [("createdAt", DESCENDING), ("_id", DESCENDING)]


def _to_order(document: dict[str, Any]) -> Order:
    return Order(**document_to_model_data(document))


def _is_order_number_conflict(error: DuplicateKeyError) -> bool:
    details = error.details or {}
    key_pattern = details.get("keyPattern") or details.get("keyValue") or {}
    if key_pattern:
        return "orderNumber" in key_pattern
    return "orderNumber" in str(error)


class MongoOrderLedger:
    """Order ledger over the ``orders`` collection."""

    def __init__(self, db: MongoDB) -> None:
        self._db = db

    async def create_order(self, order: OrderCreate) -> Order:
        document = order.to_document()
        try:
            result = await self._db.orders.insert_one(document)
        except DuplicateKeyError as e:
            if _is_order_number_conflict(e):
                raise DuplicateOrderNumber(order.orderNumber) from e
            raise PersistenceFailure(str(e)) from e
        except (PyMongoError, ConnectionError) as e:
            raise PersistenceFailure(str(e)) from e

        return Order(id=str(result.inserted_id), **order.model_dump(exclude={"grandTotal"}))

    async def get_order(self, order_id: str) -> Optional[Order]:
        if not ObjectId.is_valid(order_id):
            return None
        document = await self._db.orders.find_one({"_id": ObjectId(order_id)})
        return _to_order(document) if document else None

    async def _list(self, query: dict[str, Any]) -> list[Order]:
        cursor = self._db.orders.find(query).sort(_NEWEST_FIRST)
        return [_to_order(document) async for document in cursor]

    async def list_by_customer(self, customer_id: str) -> list[Order]:
        return await self._list({"customer": customer_id})

    async def list_by_farmer(self, farmer_id: str) -> list[Order]:
        return await self._list({"items.farmer": farmer_id})

    async def update_status(self, order_id: str, status: OrderStatus) -> Optional[Order]:
        if not ObjectId.is_valid(order_id):
            return None
        document = await self._db.orders.find_one_and_update(
            {"_id": ObjectId(order_id)},
            {"$set": {"status": status.value, "updatedAt": utc_now()}},
            return_document=ReturnDocument.AFTER,
        )
        if document:
            logger.info("Order %s status set to %s", document.get("orderNumber"), status.value)
        return _to_order(document) if document else None


# Global order ledger instance
order_ledger = MongoOrderLedger(mongodb)
