"""Order placement: cart validation, order commit and stock adjustment.

Placement runs as a sequence of separate store operations:

  1. resolve and stock-check every requested line, collecting failures
  2. if every line passed, build the order with catalog prices and write it
  3. decrement stock for each line, one product at a time

Step 3 is not atomic with step 2. If a decrement fails after the order is
written the order stays committed and the failure is logged as a
``StockAdjustmentFailure``; it is never reported to the customer. Stock read
in step 1 may be stale by step 3, so two concurrent placements can both pass
validation for the same units. The catalog's conditional decrement keeps
quantity from going negative, but both orders are committed.

With ``reserve_stock_before_commit`` the conditional decrements run before
the order is written instead. A refused decrement releases the earlier
reservations and rejects the cart with ``InsufficientStock``; a failed order
write or an unreachable catalog releases all of them and raises
``PersistenceFailure``.
"""

import logging
from decimal import Decimal
from typing import Callable, Optional, Sequence

from farmfresh.config import get_settings
from farmfresh.database.protocols import CatalogStore, OrderLedger
from farmfresh.errors import (
    CatalogStoreError,
    DuplicateOrderNumber,
    InsufficientStockError,
    OrderValidationError,
    PersistenceFailure,
    ProductNotFoundError,
    StockAdjustmentFailure,
)
from farmfresh.models.order import DeliveryAddress, Order, OrderCreate, OrderLineItem, PaymentMethod
from farmfresh.models.placement import LineFailure, LineFailureKind, ProductReference, ValidationReport
from farmfresh.models.product import Product, ProductSnapshot
from farmfresh.services.product_resolution import ProductResolver
from farmfresh.utils.helpers import generate_order_number, truncate_text

logger = logging.getLogger(__name__)


def _describe_reference(reference: ProductReference) -> str:
    return truncate_text(reference.productName or reference.productId or "")


def not_found_failure(index: int, reference: ProductReference) -> LineFailure:
    return LineFailure(
        lineIndex=index,
        kind=LineFailureKind.PRODUCT_NOT_FOUND,
        productId=reference.productId,
        productName=reference.productName,
        requested=reference.quantity,
        message=(
            f'Product "{_describe_reference(reference)}" not found '
            f"(id: {reference.productId or 'none'}, name: {reference.productName or 'none'})"
        ),
    )


def lookup_failed_failure(index: int, reference: ProductReference) -> LineFailure:
    return LineFailure(
        lineIndex=index,
        kind=LineFailureKind.LOOKUP_FAILED,
        productId=reference.productId,
        productName=reference.productName,
        requested=reference.quantity,
        message=f'Database error for "{_describe_reference(reference)}"',
    )


def insufficient_stock_failure(
    index: int, product_id: str, product_name: str, available: Optional[int], requested: int
) -> LineFailure:
    return LineFailure(
        lineIndex=index,
        kind=LineFailureKind.INSUFFICIENT_STOCK,
        productId=product_id,
        productName=product_name,
        requested=requested,
        available=available,
        message=(
            f'Insufficient stock for "{product_name}". '
            f"Available: {available if available is not None else 'unknown'}, Requested: {requested}"
        ),
    )


def snapshot_line(product: Product, quantity: int) -> OrderLineItem:
    """Freeze the resolved product into an order line."""
    return OrderLineItem(
        product=product.id,
        productName=product.name,
        quantity=quantity,
        price=product.price,
        unit=product.unit.value,
        farmer=product.farmer,
    )


def compute_total(line_items: Sequence[OrderLineItem]) -> Decimal:
    """Sum of line subtotals."""
    return sum((item.subtotal for item in line_items), Decimal("0"))


class OrderPlacementEngine:
    """Validates carts against the catalog and commits orders."""

    def __init__(
        self,
        catalog: CatalogStore,
        ledger: OrderLedger,
        *,
        resolver: Optional[ProductResolver] = None,
        delivery_fee: Optional[Decimal] = None,
        reserve_stock_before_commit: Optional[bool] = None,
        order_number_max_attempts: Optional[int] = None,
        order_number_factory: Callable[[], str] = generate_order_number,
    ) -> None:
        settings = get_settings()
        self.catalog = catalog
        self.ledger = ledger
        self.resolver = resolver or ProductResolver(catalog)
        self.delivery_fee = settings.delivery_fee if delivery_fee is None else delivery_fee
        self.reserve_stock_before_commit = (
            settings.reserve_stock_before_commit
            if reserve_stock_before_commit is None
            else reserve_stock_before_commit
        )
        self.order_number_max_attempts = order_number_max_attempts or settings.order_number_max_attempts
        self.order_number_factory = order_number_factory

    async def place_order(
        self,
        customer_id: str,
        items: Sequence[ProductReference],
        delivery_address: Optional[DeliveryAddress] = None,
        notes: str = "",
        payment_method: PaymentMethod = PaymentMethod.COD,
    ) -> Order:
        """Place an order for a customer.

        Args:
            customer_id: userId of the ordering customer
            items: Requested lines in the order the client submitted them
            delivery_address: Where to deliver
            notes: Free-text notes for the farmer
            payment_method: Cash on delivery or online

        Returns:
            The committed order, with status and payment status ``pending``.

        Raises:
            ValueError: ``items`` is empty.
            OrderValidationError: one or more lines failed; nothing was written.
            PersistenceFailure: the order could not be written.
        """
        if not items:
            raise ValueError("Order must contain at least one item")

        logger.info(
            "Placing order for customer %s with %d line(s)",
            customer_id,
            len(items),
            extra={"customer": customer_id, "line_count": len(items)},
        )

        line_items, failures = await self._validate_lines(items)
        if failures:
            logger.warning("Product validation failed for %d of %d line(s)", len(failures), len(items))
            raise OrderValidationError(await self._build_report(failures))

        fields = {
            "customer": customer_id,
            "items": line_items,
            "totalAmount": compute_total(line_items),
            "deliveryFee": self.delivery_fee,
            "paymentMethod": payment_method,
            "deliveryAddress": delivery_address or DeliveryAddress(),
            "notes": notes or "",
        }

        if self.reserve_stock_before_commit:
            reserved = await self._reserve_stock(line_items)
            try:
                return await self._commit(fields)
            except PersistenceFailure:
                await self._release_stock(reserved)
                raise

        order = await self._commit(fields)
        await self._adjust_stock(order)
        return order

    async def _validate_lines(
        self, items: Sequence[ProductReference]
    ) -> tuple[list[OrderLineItem], list[LineFailure]]:
        """Resolve and stock-check every line without stopping at the first failure.

        Lines that resolve to the same product draw on one stock figure, so
        the line that pushes the combined demand past the quantity on hand
        fails with whatever is left.
        """
        line_items: list[OrderLineItem] = []
        failures: list[LineFailure] = []
        claimed: dict[str, int] = {}

        for index, reference in enumerate(items):
            try:
                resolution = await self.resolver.resolve(reference)
            except CatalogStoreError as e:
                logger.error("Catalog lookup failed for line %d: %s", index, e)
                failures.append(lookup_failed_failure(index, reference))
                continue

            if resolution is None:
                failures.append(not_found_failure(index, reference))
                continue

            product = resolution.product
            remaining = max(product.quantity - claimed.get(product.id, 0), 0)
            if remaining < reference.quantity:
                failures.append(
                    insufficient_stock_failure(index, product.id, product.name, remaining, reference.quantity)
                )
                continue

            claimed[product.id] = claimed.get(product.id, 0) + reference.quantity
            line_items.append(snapshot_line(product, reference.quantity))

        return line_items, failures

    async def _build_report(self, failures: list[LineFailure]) -> ValidationReport:
        try:
            products = await self.catalog.list_all()
        except CatalogStoreError as e:
            logger.error("Could not load the availability snapshot: %s", e)
            products = []
        return ValidationReport(
            failures=failures,
            availableProducts=[ProductSnapshot.from_product(product) for product in products],
        )

    async def _commit(self, fields: dict) -> Order:
        """Write the order, regenerating the order number on conflict."""
        for attempt in range(1, self.order_number_max_attempts + 1):
            aggregate = OrderCreate(orderNumber=self.order_number_factory(), **fields)
            try:
                order = await self.ledger.create_order(aggregate)
            except DuplicateOrderNumber as e:
                logger.warning(
                    "Order number %s already taken (attempt %d/%d)",
                    e.order_number,
                    attempt,
                    self.order_number_max_attempts,
                )
                continue

            logger.info(
                "Order created successfully: %s",
                order.orderNumber,
                extra={"order_number": order.orderNumber, "total_amount": str(order.totalAmount)},
            )
            return order

        raise PersistenceFailure(
            f"no unique order number after {self.order_number_max_attempts} attempts"
        )

    async def _adjust_stock(self, order: Order) -> list[StockAdjustmentFailure]:
        """Decrement stock for a committed order, isolating each product's failure."""
        failures: list[StockAdjustmentFailure] = []

        for item in order.items:
            try:
                await self.catalog.decrement_quantity(item.product, item.quantity)
            except CatalogStoreError as e:
                failure = StockAdjustmentFailure(order.orderNumber, item.product, item.quantity, str(e))
                logger.error(
                    "%s",
                    failure,
                    extra={
                        "order_number": order.orderNumber,
                        "product_id": item.product,
                        "amount": item.quantity,
                    },
                )
                failures.append(failure)
                continue

            logger.info("Stock updated for %s (-%d)", item.productName, item.quantity)

        if failures:
            logger.error(
                "Order %s committed with %d unreconciled stock adjustment(s)",
                order.orderNumber,
                len(failures),
            )
        return failures

    async def _reserve_stock(self, line_items: list[OrderLineItem]) -> list[OrderLineItem]:
        """Conditionally decrement every line before the order is written."""
        reserved: list[OrderLineItem] = []

        for index, item in enumerate(line_items):
            try:
                await self.catalog.decrement_quantity(item.product, item.quantity)
            except InsufficientStockError as e:
                failure = insufficient_stock_failure(
                    index, item.product, item.productName, e.available, item.quantity
                )
            except ProductNotFoundError:
                failure = not_found_failure(
                    index,
                    ProductReference(productId=item.product, productName=item.productName, quantity=item.quantity),
                )
            except CatalogStoreError as e:
                await self._release_stock(reserved)
                raise PersistenceFailure(f"stock reservation failed: {e}") from e
            else:
                reserved.append(item)
                continue

            logger.warning("Stock reservation refused at commit time: %s", failure.message)
            await self._release_stock(reserved)
            raise OrderValidationError(await self._build_report([failure]))

        return reserved

    async def _release_stock(self, reserved: list[OrderLineItem]) -> None:
        """Give reserved stock back after an aborted placement."""
        for item in reserved:
            try:
                await self.catalog.increment_quantity(item.product, item.quantity)
            except CatalogStoreError as e:
                logger.error(
                    "Failed to release %d reserved unit(s) of product %s: %s",
                    item.quantity,
                    item.product,
                    e,
                    extra={"product_id": item.product, "amount": item.quantity},
                )
