"""Application configuration management using Pydantic Settings."""
from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the directory where config.py is located
BASE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application
    app_name: str = "FarmFresh Marketplace"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="development", pattern="^(development|staging|production)$")

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    api_prefix: str = "/api"
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # MongoDB
    mongodb_url: str = Field(default="mongodb://localhost:27017")
    mongodb_database: str = "farmers_market"
    mongodb_user_collection: str = "users"
    mongodb_product_collection: str = "products"
    mongodb_order_collection: str = "orders"
    mongodb_max_pool_size: int = 10
    mongodb_min_pool_size: int = 1

    # Orders
    delivery_fee: Decimal = Field(default=Decimal("50"), ge=0, description="Flat delivery fee per order")
    order_number_max_attempts: int = Field(default=5, ge=1)
    reserve_stock_before_commit: bool = Field(
        default=False,
        description="Reserve stock with conditional decrements before the order is written",
    )

    # Recommendations
    trending_limit: int = Field(default=6, ge=1, le=50)

    # Logging
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_format: str = Field(default="json", pattern="^(json|text)$")

    model_config = SettingsConfigDict(
        env_file=BASE_DIR.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
