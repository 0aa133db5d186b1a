"""User data models."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, EmailStr, Field


class UserRole(str, Enum):
    """Marketplace roles."""

    CUSTOMER = "customer"
    FARMER = "farmer"


class UserBase(BaseModel):
    """Base user model."""

    userId: str = Field(..., min_length=1, description="Unique user identifier")
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(..., pattern=r"^\+?\d{10,15}$")
    role: UserRole = UserRole.CUSTOMER


class UserCreate(UserBase):
    """User creation model."""

    pass


class UserInDB(UserBase):
    """User model as stored in database."""

    createdAt: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updatedAt: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = {
        "json_schema_extra": {
            "example": {
                "userId": "user_001",
                "name": "Asha Patil",
                "email": "asha.patil@example.com",
                "phone": "+919876543210",
                "role": "customer",
                "createdAt": "2024-01-01T00:00:00",
                "updatedAt": "2024-01-01T00:00:00",
            }
        }
    }


class UserResponse(UserBase):
    """User response model."""

    createdAt: datetime
    updatedAt: datetime
