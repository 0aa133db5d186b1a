"""Database initialization script.

Connects to MongoDB (which creates the indexes, including the unique
order-number index) and creates sample farmers and customers.

Usage:
    python -m scripts.init_db
"""

import asyncio
import logging

from farmfresh.database.mongodb import mongodb
from farmfresh.models.user import UserCreate, UserRole
from farmfresh.services.user_service import user_service
from farmfresh.utils.logger import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

SAMPLE_USERS = [
    UserCreate(
        userId="farmer_001",
        name="Ramesh Jadhav",
        email="ramesh.jadhav@example.com",
        phone="+919800000001",
        role=UserRole.FARMER,
    ),
    UserCreate(
        userId="farmer_002",
        name="Lakshmi Iyer",
        email="lakshmi.iyer@example.com",
        phone="+919800000002",
        role=UserRole.FARMER,
    ),
    UserCreate(
        userId="user_001",
        name="Asha Patil",
        email="asha.patil@example.com",
        phone="+919800000101",
        role=UserRole.CUSTOMER,
    ),
    UserCreate(
        userId="user_002",
        name="Vikram Singh",
        email="vikram.singh@example.com",
        phone="+919800000102",
        role=UserRole.CUSTOMER,
    ),
]


async def init_databases() -> None:
    """Initialize the database and create sample users."""
    try:
        logger.info("Initializing database...")
        await mongodb.connect()

        for user in SAMPLE_USERS:
            try:
                await user_service.create_user(user)
            except ValueError as e:
                logger.warning("User %s already exists: %s", user.userId, e)

        logger.info("Database initialization completed successfully")

    except Exception as e:
        logger.error("Error initializing database: %s", e)
        raise

    finally:
        await mongodb.disconnect()


if __name__ == "__main__":
    asyncio.run(init_databases())
