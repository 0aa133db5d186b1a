"""MongoDB database connection and operations."""

import logging
from datetime import UTC
from decimal import Decimal
from typing import Any, Optional

from bson.codec_options import CodecOptions, TypeCodec, TypeRegistry
from bson.decimal128 import Decimal128
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import ConnectionFailure, DuplicateKeyError

from farmfresh.config import get_settings
from farmfresh.models.user import UserCreate, UserInDB
from farmfresh.utils.helpers import utc_now

logger = logging.getLogger(__name__)
settings = get_settings()


class DecimalCodec(TypeCodec):
    """Store ``Decimal`` values as BSON Decimal128 and read them back."""

    python_type = Decimal
    bson_type = Decimal128

    def transform_python(self, value: Decimal) -> Decimal128:
        return Decimal128(value)

    def transform_bson(self, value: Decimal128) -> Decimal:
        return value.to_decimal()


CODEC_OPTIONS: CodecOptions = CodecOptions(
    tz_aware=True,
    tzinfo=UTC,
    type_registry=TypeRegistry([DecimalCodec()]),
)


def document_to_model_data(document: dict[str, Any]) -> dict[str, Any]:
    """Rename Mongo's ``_id`` to a string ``id``."""
    data = dict(document)
    data["id"] = str(data.pop("_id"))
    return data


class MongoDB:
    """MongoDB connection manager."""

    def __init__(self) -> None:
        """Initialize MongoDB connection."""
        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None

    async def connect(self) -> None:
        """Connect to MongoDB."""
        try:
            self.client = AsyncIOMotorClient(
                settings.mongodb_url,
                maxPoolSize=settings.mongodb_max_pool_size,
                minPoolSize=settings.mongodb_min_pool_size,
            )
            self.db = self.client.get_database(
                settings.mongodb_database, codec_options=CODEC_OPTIONS
            )

            # Test connection
            await self.client.admin.command("ping")
            logger.info("Connected to MongoDB: %s", settings.mongodb_database)

            await self._create_indexes()

        except ConnectionFailure as e:
            logger.error("Failed to connect to MongoDB: %s", e)
            raise

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("Disconnected from MongoDB")

    @property
    def is_connected(self) -> bool:
        return self.db is not None

    def collection(self, name: str) -> AsyncIOMotorCollection:
        """Get a collection, failing fast when not connected."""
        if self.db is None:
            raise ConnectionError("Database not connected")
        return self.db[name]

    @property
    def users(self) -> AsyncIOMotorCollection:
        return self.collection(settings.mongodb_user_collection)

    @property
    def products(self) -> AsyncIOMotorCollection:
        return self.collection(settings.mongodb_product_collection)

    @property
    def orders(self) -> AsyncIOMotorCollection:
        return self.collection(settings.mongodb_order_collection)

    async def _create_indexes(self) -> None:
        """Create database indexes."""
        await self.users.create_index("userId", unique=True, name="userId_unique")
        await self.users.create_index("email", name="email_index")

        await self.products.create_index("name", name="name_index")
        await self.products.create_index(
            [("quantity", ASCENDING), ("createdAt", DESCENDING)], name="stock_recency_index"
        )

        # Order numbers are generated optimistically; this index is what
        # actually guarantees they are never reused.
        await self.orders.create_index("orderNumber", unique=True, name="orderNumber_unique")
        await self.orders.create_index(
            [("customer", ASCENDING), ("createdAt", DESCENDING)], name="customer_orders_index"
        )
        await self.orders.create_index("items.farmer", name="farmer_orders_index")
        logger.info("MongoDB indexes created")

    async def create_user(self, user: UserCreate) -> UserInDB:
        """Create a new user."""
        try:
            user_data = user.model_dump()
            user_data["createdAt"] = utc_now()
            user_data["updatedAt"] = utc_now()

            result = await self.users.insert_one(user_data)

            if result.inserted_id:
                created_user = await self.get_user(user.userId)
                if created_user:
                    return created_user

            raise ValueError("Failed to create user")

        except DuplicateKeyError:
            raise ValueError(f"User with userId '{user.userId}' already exists")

    async def get_user(self, user_id: str) -> Optional[UserInDB]:
        """Get user by ID."""
        user_data = await self.users.find_one({"userId": user_id}, {"_id": 0})

        if user_data:
            return UserInDB(**user_data)
        return None


# Global MongoDB instance
mongodb = MongoDB()
