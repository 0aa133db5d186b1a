"""Custom exceptions for the marketplace backend."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from farmfresh.models.placement import ValidationReport


class FarmFreshError(Exception):
    """Base exception for all marketplace errors."""

    pass


class OrderValidationError(FarmFreshError):
    """Raised when one or more requested order lines fail validation.

    Carries the complete report: every failed line plus a snapshot of the
    products currently available, so the caller can correct the cart in one
    round trip.
    """

    def __init__(self, report: "ValidationReport"):
        self.report = report
        super().__init__(f"Product validation failed: {len(report.failures)} line(s) rejected")


class PersistenceFailure(FarmFreshError):
    """Raised when the order could not be written. Nothing was committed."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to persist order: {reason}")


class StockAdjustmentFailure(FarmFreshError):
    """A post-commit stock decrement failed for one product.

    The order is already committed when this happens; it is logged and never
    raised to the caller of order placement.
    """

    def __init__(self, order_number: str, product_id: str, amount: int, reason: str):
        self.order_number = order_number
        self.product_id = product_id
        self.amount = amount
        self.reason = reason
        super().__init__(
            f"Stock adjustment failed for product {product_id} on order {order_number} "
            f"(amount={amount}): {reason}"
        )


class CatalogStoreError(FarmFreshError):
    """Raised when the catalog store cannot complete an operation."""

    pass


class ProductNotFoundError(CatalogStoreError):
    """Raised when a product ID doesn't exist in the catalog."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class InsufficientStockError(CatalogStoreError):
    """Raised when a conditional decrement would take stock below zero."""

    def __init__(self, product_id: str, requested: int, available: Optional[int] = None):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for product {product_id}. "
            f"Available: {available if available is not None else 'unknown'}, Requested: {requested}"
        )


class DuplicateOrderNumber(FarmFreshError):
    """Raised by the order ledger when an order number is already taken."""

    def __init__(self, order_number: str):
        self.order_number = order_number
        super().__init__(f"Order number already exists: {order_number}")


class OrderNotFound(FarmFreshError):
    """Raised when an order ID doesn't exist."""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class InvalidStatusTransition(FarmFreshError):
    """Raised when an order status change breaks the order lifecycle."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change order status from '{current}' to '{requested}'")


class PermissionDenied(FarmFreshError):
    """Raised when a user acts on a resource they do not own."""

    pass
