"""Order placement input and validation report models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field, model_validator

from farmfresh.models.common import Money
from farmfresh.models.product import ProductSnapshot


class ProductReference(BaseModel):
    """One requested cart line: a product reference plus a quantity.

    Clients may send the product ID, a display name, or both. Any price the
    client includes is accepted and ignored; totals always come from the
    catalog.
    """

    productId: Optional[str] = Field(None, description="Catalog product ID")
    productName: Optional[str] = Field(None, description="Product display name")
    quantity: int = Field(..., ge=1)
    price: Optional[Money] = Field(None, description="Ignored; the catalog price is authoritative")

    @model_validator(mode="after")
    def require_reference(self) -> "ProductReference":
        """At least one of productId or productName must be present."""
        if not self.productId and not self.productName:
            raise ValueError("Each item needs a productId or a productName")
        return self


class LineFailureKind(str, Enum):
    """Why a requested line was rejected."""

    PRODUCT_NOT_FOUND = "ProductNotFound"
    INSUFFICIENT_STOCK = "InsufficientStock"
    LOOKUP_FAILED = "LookupFailed"


class LineFailure(BaseModel):
    """A rejected cart line."""

    lineIndex: int = Field(..., ge=0, description="Position of the line in the request")
    kind: LineFailureKind
    productId: Optional[str] = None
    productName: Optional[str] = None
    requested: int
    available: Optional[int] = None
    message: str


class ValidationReport(BaseModel):
    """Every rejected line of a placement plus current availability."""

    failures: list[LineFailure] = Field(default_factory=list)
    availableProducts: list[ProductSnapshot] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def errors(self) -> list[str]:
        """Human-readable failure messages in request order."""
        return [failure.message for failure in self.failures]
