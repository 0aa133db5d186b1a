"""User service for business logic."""

import logging
from typing import Optional, Protocol

from farmfresh.database.mongodb import mongodb
from farmfresh.models.user import UserCreate, UserInDB

logger = logging.getLogger(__name__)


class UserStore(Protocol):
    async def create_user(self, user: UserCreate) -> UserInDB: ...

    async def get_user(self, user_id: str) -> Optional[UserInDB]: ...


class UserService:
    """User service for handling user-related operations."""

    def __init__(self, store: UserStore) -> None:
        self.store = store

    async def create_user(self, user: UserCreate) -> UserInDB:
        """Create a new user."""
        try:
            created = await self.store.create_user(user)
        except ValueError as e:
            logger.error("Error creating user: %s", e)
            raise
        logger.info("Created %s %s", created.role.value, created.userId)
        return created

    async def get_user(self, user_id: str) -> Optional[UserInDB]:
        """Get user by ID."""
        return await self.store.get_user(user_id)


# Global user service instance
user_service = UserService(mongodb)
