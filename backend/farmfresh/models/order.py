"""Order data models."""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from farmfresh.models.common import Money


class OrderStatus(str, Enum):
    """Order fulfilment status."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# Allowed next statuses for each status; terminal statuses map to nothing.
ORDER_STATUS_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


class PaymentStatus(str, Enum):
    """Payment state of an order."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class PaymentMethod(str, Enum):
    """How the customer pays."""

    COD = "cod"
    ONLINE = "online"


class DeliveryAddress(BaseModel):
    """Delivery address for an order."""

    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = Field(None, pattern=r"^\d{6}$")
    phone: Optional[str] = Field(None, pattern=r"^\+?\d{10,15}$")


class OrderLineItem(BaseModel):
    """Line item in an order.

    A snapshot of the product as resolved when the order was placed, so later
    catalog price or name changes never rewrite order history.
    """

    product: str = Field(..., description="Catalog product ID")
    productName: str = Field(..., description="Product name at order time")
    quantity: int = Field(..., ge=1, description="Quantity ordered")
    price: Money = Field(..., ge=0, description="Unit price at order time")
    unit: str = Field(..., description="Unit of measure")
    farmer: str = Field(..., description="userId of the farmer who owns the product")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def subtotal(self) -> Money:
        """Unit price times quantity."""
        return self.price * self.quantity


class OrderCreate(BaseModel):
    """Order aggregate built by order placement, before it is persisted."""

    orderNumber: str = Field(..., min_length=1, description="Human-readable order number")
    customer: str = Field(..., description="userId of the customer")
    items: list[OrderLineItem] = Field(..., min_length=1)
    totalAmount: Money = Field(..., ge=0, description="Sum of line subtotals")
    deliveryFee: Money = Field(default=Decimal("50"), ge=0)
    status: OrderStatus = OrderStatus.PENDING
    paymentStatus: PaymentStatus = PaymentStatus.PENDING
    paymentMethod: PaymentMethod = PaymentMethod.COD
    deliveryAddress: DeliveryAddress = Field(default_factory=DeliveryAddress)
    notes: str = ""
    createdAt: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updatedAt: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def grandTotal(self) -> Money:
        """Items total plus the delivery fee."""
        return self.totalAmount + self.deliveryFee

    def to_document(self) -> dict:
        """Serialize for storage, leaving out derived fields."""
        return self.model_dump(mode="python", exclude={"grandTotal": True, "items": {"__all__": {"subtotal"}}})


class Order(OrderCreate):
    """Order model as stored in the ledger."""

    id: str = Field(..., description="Ledger order ID")

    model_config = {
        "json_schema_extra": {
            "example": {
                "id": "665f1c2b9a1e4f0012ab34ff",
                "orderNumber": "ORD1718000000000042",
                "customer": "user_001",
                "items": [
                    {
                        "product": "665f1c2b9a1e4f0012ab34cd",
                        "productName": "Tomatoes",
                        "quantity": 5,
                        "price": 20.0,
                        "unit": "kg",
                        "farmer": "farmer_001",
                        "subtotal": 100.0,
                    }
                ],
                "totalAmount": 100.0,
                "deliveryFee": 50.0,
                "grandTotal": 150.0,
                "status": "pending",
                "paymentStatus": "pending",
                "paymentMethod": "cod",
                "deliveryAddress": {"street": "12 MG Road", "city": "Pune", "pincode": "411001"},
                "notes": "",
            }
        }
    }
