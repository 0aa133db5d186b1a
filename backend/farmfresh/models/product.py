"""Product data models."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, computed_field, field_validator

from farmfresh.models.common import Money


class ProductCategory(str, Enum):
    """Catalog categories."""

    VEGETABLES = "vegetables"
    FRUITS = "fruits"
    GRAINS = "grains"
    DAIRY = "dairy"
    HERBS = "herbs"
    SPICES = "spices"
    OTHERS = "others"


class ProductUnit(str, Enum):
    """Units a product is sold in."""

    KG = "kg"
    G = "g"
    PIECES = "pieces"
    LITERS = "liters"
    ML = "ml"
    DOZEN = "dozen"


class ProductBase(BaseModel):
    """Base product model."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    price: Money = Field(..., ge=0, decimal_places=2, description="Unit price in INR")
    quantity: int = Field(..., ge=0, description="Quantity on hand")
    category: ProductCategory = ProductCategory.VEGETABLES
    unit: ProductUnit = ProductUnit.KG
    isOrganic: bool = True

    @field_validator("category", "unit", mode="before")
    @classmethod
    def lowercase_enum(cls, v: object) -> object:
        """Accept enum values in any case."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class ProductCreate(ProductBase):
    """Product creation model submitted by a farmer."""

    price: Money = Field(..., gt=0, decimal_places=2, description="Unit price in INR")
    quantity: int = Field(..., gt=0, description="Initial quantity on hand")

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:
        """Trim surrounding whitespace."""
        if isinstance(v, str):
            return v.strip()
        return v


class Product(ProductBase):
    """Product model as stored in the catalog."""

    id: str = Field(..., description="Catalog product ID")
    farmer: str = Field(..., description="userId of the owning farmer")
    createdAt: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updatedAt: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def inStock(self) -> bool:
        """Whether any quantity is on hand."""
        return self.quantity > 0

    model_config = {
        "json_schema_extra": {
            "example": {
                "id": "665f1c2b9a1e4f0012ab34cd",
                "name": "Tomatoes",
                "description": "Vine-ripened organic tomatoes",
                "price": 20.0,
                "quantity": 10,
                "category": "vegetables",
                "unit": "kg",
                "isOrganic": True,
                "farmer": "farmer_001",
                "inStock": True,
            }
        }
    }


class ProductSnapshot(BaseModel):
    """Availability snapshot of a product, used in order validation reports."""

    id: str = Field(..., serialization_alias="_id")
    name: str
    stock: int
    price: Money
    category: ProductCategory

    @classmethod
    def from_product(cls, product: Product) -> "ProductSnapshot":
        """Build a snapshot from a catalog product."""
        return cls(
            id=product.id,
            name=product.name,
            stock=product.quantity,
            price=product.price,
            category=product.category,
        )
