"""Order service for business logic."""

import logging
from typing import Optional, Sequence

from farmfresh.database.catalog import catalog_store
from farmfresh.database.ledger import order_ledger
from farmfresh.database.protocols import CatalogStore, OrderLedger
from farmfresh.errors import InvalidStatusTransition, OrderNotFound, PermissionDenied
from farmfresh.models.order import ORDER_STATUS_TRANSITIONS, DeliveryAddress, Order, OrderStatus, PaymentMethod
from farmfresh.models.placement import ProductReference
from farmfresh.services.order_placement import OrderPlacementEngine

logger = logging.getLogger(__name__)


class OrderService:
    """Order service for handling order-related operations."""

    def __init__(
        self,
        catalog: CatalogStore,
        ledger: OrderLedger,
        engine: Optional[OrderPlacementEngine] = None,
    ) -> None:
        self.ledger = ledger
        self.engine = engine or OrderPlacementEngine(catalog, ledger)

    async def place_order(
        self,
        customer_id: str,
        items: Sequence[ProductReference],
        delivery_address: Optional[DeliveryAddress] = None,
        notes: str = "",
        payment_method: PaymentMethod = PaymentMethod.COD,
    ) -> Order:
        """Place an order via the placement engine."""
        return await self.engine.place_order(
            customer_id,
            items,
            delivery_address=delivery_address,
            notes=notes,
            payment_method=payment_method,
        )

    async def list_customer_orders(self, customer_id: str) -> list[Order]:
        """Get a customer's orders, newest first."""
        return await self.ledger.list_by_customer(customer_id)

    async def list_farmer_orders(self, farmer_id: str) -> list[Order]:
        """Get orders containing a farmer's products, showing only that farmer's lines."""
        orders = await self.ledger.list_by_farmer(farmer_id)
        return [
            order.model_copy(update={"items": [item for item in order.items if item.farmer == farmer_id]})
            for order in orders
        ]

    async def update_status(self, order_id: str, farmer_id: str, status: OrderStatus) -> Order:
        """Move an order along its lifecycle.

        Only a farmer with at least one line in the order may change it, and
        only to a status reachable from the current one.
        """
        order = await self.ledger.get_order(order_id)
        if order is None:
            raise OrderNotFound(order_id)

        if not any(item.farmer == farmer_id for item in order.items):
            raise PermissionDenied("You can only update orders containing your products")

        if status not in ORDER_STATUS_TRANSITIONS[order.status]:
            raise InvalidStatusTransition(order.status.value, status.value)

        updated = await self.ledger.update_status(order_id, status)
        if updated is None:
            raise OrderNotFound(order_id)

        logger.info(
            "Order %s moved from %s to %s by %s",
            order.orderNumber,
            order.status.value,
            status.value,
            farmer_id,
        )
        return updated


# Global order service instance
order_service = OrderService(catalog_store, order_ledger)
