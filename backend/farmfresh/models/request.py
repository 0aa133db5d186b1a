"""API request and response models."""

from typing import Optional

from pydantic import BaseModel, Field

from farmfresh.models.common import Money
from farmfresh.models.order import DeliveryAddress, Order, OrderStatus, PaymentMethod
from farmfresh.models.placement import LineFailure, ProductReference
from farmfresh.models.product import Product, ProductSnapshot


class PlaceOrderRequest(BaseModel):
    """Order placement request body."""

    items: list[ProductReference] = Field(..., min_length=1, description="Requested cart lines")
    deliveryAddress: DeliveryAddress = Field(default_factory=DeliveryAddress)
    notes: str = Field(default="", max_length=1000)
    paymentMethod: PaymentMethod = PaymentMethod.COD
    totalAmount: Optional[Money] = Field(None, description="Ignored; recomputed from the catalog")

    model_config = {
        "json_schema_extra": {
            "example": {
                "items": [
                    {"productId": "665f1c2b9a1e4f0012ab34cd", "productName": "Tomatoes", "quantity": 5},
                    {"productName": "spinach", "quantity": 2},
                ],
                "deliveryAddress": {
                    "street": "12 MG Road",
                    "city": "Pune",
                    "state": "Maharashtra",
                    "pincode": "411001",
                    "phone": "+919876543210",
                },
                "notes": "Leave at the gate",
                "paymentMethod": "cod",
            }
        }
    }


class PlaceOrderResponse(BaseModel):
    """Successful order placement response."""

    success: bool = True
    message: str = "Order placed successfully"
    order: Order


class OrderValidationResponse(BaseModel):
    """Rejected order placement response."""

    success: bool = False
    message: str = "Product validation failed"
    errors: list[str]
    failures: list[LineFailure]
    availableProducts: list[ProductSnapshot]


class OrderStatusUpdate(BaseModel):
    """Order status change request body."""

    status: OrderStatus


class OrderStatusResponse(BaseModel):
    """Order status change response."""

    message: str = "Order status updated successfully"
    order: Order


class ProductListResponse(BaseModel):
    """Product listing response."""

    success: bool = True
    data: list[Product]
    count: int


class ProductResponse(BaseModel):
    """Single product response."""

    success: bool = True
    message: Optional[str] = None
    data: Product


class TrendingResponse(BaseModel):
    """Trending products response."""

    success: bool = True
    trendingProducts: list[Product]
    count: int


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    services: dict[str, str]
