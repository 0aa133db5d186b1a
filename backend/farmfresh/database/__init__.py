"""Database package."""

from farmfresh.database.catalog import MongoCatalogStore, catalog_store
from farmfresh.database.ledger import MongoOrderLedger, order_ledger
from farmfresh.database.mongodb import MongoDB, mongodb
from farmfresh.database.protocols import CatalogStore, OrderLedger

__all__ = [
    "MongoDB",
    "mongodb",
    "CatalogStore",
    "OrderLedger",
    "MongoCatalogStore",
    "catalog_store",
    "MongoOrderLedger",
    "order_ledger",
]
