"""Protocol definitions for the stores order placement depends on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from farmfresh.models.order import Order, OrderCreate, OrderStatus
    from farmfresh.models.product import Product, ProductCreate


class CatalogStore(Protocol):
    """Persistent collection of products.

    Name lookups take the client-supplied name as a literal; implementations
    that match with regular expressions must escape it first.
    """

    async def find_by_id(self, product_id: str) -> Optional[Product]:
        """Exact lookup by product ID. A malformed ID is a miss."""
        ...

    async def find_by_exact_name(self, name: str) -> Optional[Product]:
        """Exact, case-sensitive name match."""
        ...

    async def find_by_name_case_insensitive(self, name: str) -> Optional[Product]:
        """Whole-name match ignoring case."""
        ...

    async def find_by_name_substring(self, name: str) -> Optional[Product]:
        """Case-insensitive substring match."""
        ...

    async def decrement_quantity(self, product_id: str, amount: int) -> Product:
        """Atomically take ``amount`` off the quantity on hand.

        Raises:
            InsufficientStockError: the result would be negative; nothing changed.
            ProductNotFoundError: no product has this ID.
        """
        ...

    async def increment_quantity(self, product_id: str, amount: int) -> Product:
        """Atomically add ``amount`` back to the quantity on hand."""
        ...

    async def list_all(self) -> list[Product]:
        """Every product in the catalog."""
        ...

    async def create_product(self, farmer_id: str, product: ProductCreate) -> Product:
        """Insert a new product owned by ``farmer_id``."""
        ...

    async def list_in_stock(self, limit: int) -> list[Product]:
        """Newest products with quantity on hand."""
        ...


class OrderLedger(Protocol):
    """Persistent collection of orders."""

    async def create_order(self, order: OrderCreate) -> Order:
        """Write a new order in one operation.

        Raises:
            DuplicateOrderNumber: the order number is already taken.
            PersistenceFailure: any other write failure.
        """
        ...

    async def get_order(self, order_id: str) -> Optional[Order]:
        """Lookup by ledger ID."""
        ...

    async def list_by_customer(self, customer_id: str) -> list[Order]:
        """Orders placed by a customer, newest first."""
        ...

    async def list_by_farmer(self, farmer_id: str) -> list[Order]:
        """Orders containing at least one of the farmer's products, newest first."""
        ...

    async def update_status(self, order_id: str, status: OrderStatus) -> Optional[Order]:
        """Set the order status and return the updated order."""
        ...
