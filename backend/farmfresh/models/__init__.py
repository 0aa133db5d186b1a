"""Data models package."""

from farmfresh.models.order import (
    ORDER_STATUS_TRANSITIONS,
    DeliveryAddress,
    Order,
    OrderCreate,
    OrderLineItem,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from farmfresh.models.placement import (
    LineFailure,
    LineFailureKind,
    ProductReference,
    ValidationReport,
)
from farmfresh.models.product import (
    Product,
    ProductBase,
    ProductCategory,
    ProductCreate,
    ProductSnapshot,
    ProductUnit,
)
from farmfresh.models.request import (
    ErrorResponse,
    HealthResponse,
    OrderStatusResponse,
    OrderStatusUpdate,
    OrderValidationResponse,
    PlaceOrderRequest,
    PlaceOrderResponse,
    ProductListResponse,
    ProductResponse,
    TrendingResponse,
)
from farmfresh.models.user import UserCreate, UserInDB, UserResponse, UserRole

__all__ = [
    # User models
    "UserCreate",
    "UserInDB",
    "UserResponse",
    "UserRole",
    # Product models
    "Product",
    "ProductBase",
    "ProductCategory",
    "ProductCreate",
    "ProductSnapshot",
    "ProductUnit",
    # Order models
    "ORDER_STATUS_TRANSITIONS",
    "DeliveryAddress",
    "Order",
    "OrderCreate",
    "OrderLineItem",
    "OrderStatus",
    "PaymentMethod",
    "PaymentStatus",
    # Placement models
    "LineFailure",
    "LineFailureKind",
    "ProductReference",
    "ValidationReport",
    # Request/Response models
    "PlaceOrderRequest",
    "PlaceOrderResponse",
    "OrderValidationResponse",
    "OrderStatusUpdate",
    "OrderStatusResponse",
    "ProductListResponse",
    "ProductResponse",
    "TrendingResponse",
    "HealthResponse",
    "ErrorResponse",
]
