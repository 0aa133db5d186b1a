"""Pytest fixtures for marketplace tests."""

import asyncio
import re
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import Optional

import pytest
from bson import ObjectId

from farmfresh.errors import (
    CatalogStoreError,
    DuplicateOrderNumber,
    InsufficientStockError,
    PersistenceFailure,
    ProductNotFoundError,
)
from farmfresh.models.order import Order, OrderCreate, OrderStatus
from farmfresh.models.product import Product, ProductCategory, ProductCreate, ProductUnit
from farmfresh.models.user import UserCreate, UserInDB, UserRole
from farmfresh.services.order_placement import OrderPlacementEngine

BASE_TIME = datetime(2024, 6, 1, 8, 0, tzinfo=UTC)


class InMemoryCatalog:
    """Catalog store that yields to the event loop on every call.

    Each call suspends before touching state, like a real network round trip,
    so concurrent placements interleave the way they would against MongoDB.
    """

    def __init__(self) -> None:
        self.products: dict[str, Product] = {}
        self.calls: list[tuple[str, str]] = []
        self.broken_decrements: set[str] = set()
        self.refused_decrements: set[str] = set()

    def add(
        self,
        name: str,
        price: str | int,
        quantity: int,
        *,
        farmer: str = "farmer_001",
        category: ProductCategory = ProductCategory.VEGETABLES,
        unit: ProductUnit = ProductUnit.KG,
    ) -> Product:
        created_at = BASE_TIME + timedelta(minutes=len(self.products))
        product = Product(
            id=str(ObjectId()),
            name=name,
            description=f"Fresh {name.lower()}",
            price=Decimal(str(price)),
            quantity=quantity,
            category=category,
            unit=unit,
            farmer=farmer,
            createdAt=created_at,
            updatedAt=created_at,
        )
        self.products[product.id] = product
        return product

    def quantity_of(self, product_id: str) -> int:
        return self.products[product_id].quantity

    async def _call(self, operation: str, argument: str) -> None:
        await asyncio.sleep(0)
        self.calls.append((operation, argument))

    def _first(self, predicate) -> Optional[Product]:
        for product in self.products.values():
            if predicate(product):
                return product.model_copy()
        return None

    async def find_by_id(self, product_id: str) -> Optional[Product]:
        await self._call("find_by_id", product_id)
        product = self.products.get(product_id)
        return product.model_copy() if product else None

    async def find_by_exact_name(self, name: str) -> Optional[Product]:
        await self._call("find_by_exact_name", name)
        return self._first(lambda p: p.name == name)

    async def find_by_name_case_insensitive(self, name: str) -> Optional[Product]:
        await self._call("find_by_name_case_insensitive", name)
        pattern = re.compile(re.escape(name), re.IGNORECASE)
        return self._first(lambda p: pattern.fullmatch(p.name) is not None)

    async def find_by_name_substring(self, name: str) -> Optional[Product]:
        await self._call("find_by_name_substring", name)
        pattern = re.compile(re.escape(name), re.IGNORECASE)
        return self._first(lambda p: pattern.search(p.name) is not None)

    async def decrement_quantity(self, product_id: str, amount: int) -> Product:
        await self._call("decrement_quantity", product_id)
        if product_id in self.broken_decrements:
            raise CatalogStoreError(f"Stock update failed for product {product_id}: connection reset")
        product = self.products.get(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        if product_id in self.refused_decrements or product.quantity < amount:
            raise InsufficientStockError(product_id, requested=amount, available=product.quantity)
        self.products[product_id] = product.model_copy(update={"quantity": product.quantity - amount})
        return self.products[product_id].model_copy()

    async def increment_quantity(self, product_id: str, amount: int) -> Product:
        await self._call("increment_quantity", product_id)
        product = self.products.get(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        self.products[product_id] = product.model_copy(update={"quantity": product.quantity + amount})
        return self.products[product_id].model_copy()

    async def list_all(self) -> list[Product]:
        await self._call("list_all", "")
        return [product.model_copy() for product in reversed(self.products.values())]

    async def list_in_stock(self, limit: int) -> list[Product]:
        await self._call("list_in_stock", str(limit))
        in_stock = [p.model_copy() for p in reversed(self.products.values()) if p.quantity > 0]
        return in_stock[:limit]

    async def create_product(self, farmer_id: str, product: ProductCreate) -> Product:
        await self._call("create_product", product.name)
        created = Product(id=str(ObjectId()), farmer=farmer_id, **product.model_dump())
        self.products[created.id] = created
        return created.model_copy()


class InMemoryLedger:
    """Order ledger with a unique order number constraint."""

    def __init__(self) -> None:
        self.orders: dict[str, Order] = {}
        self.fail_writes = False

    async def create_order(self, order: OrderCreate) -> Order:
        await asyncio.sleep(0)
        if self.fail_writes:
            raise PersistenceFailure("write concern timed out")
        if any(existing.orderNumber == order.orderNumber for existing in self.orders.values()):
            raise DuplicateOrderNumber(order.orderNumber)
        stored = Order(id=str(ObjectId()), **order.model_dump(exclude={"grandTotal"}))
        self.orders[stored.id] = stored
        return stored.model_copy()

    async def get_order(self, order_id: str) -> Optional[Order]:
        await asyncio.sleep(0)
        order = self.orders.get(order_id)
        return order.model_copy() if order else None

    async def list_by_customer(self, customer_id: str) -> list[Order]:
        await asyncio.sleep(0)
        return [o.model_copy() for o in reversed(self.orders.values()) if o.customer == customer_id]

    async def list_by_farmer(self, farmer_id: str) -> list[Order]:
        await asyncio.sleep(0)
        return [
            o.model_copy()
            for o in reversed(self.orders.values())
            if any(item.farmer == farmer_id for item in o.items)
        ]

    async def update_status(self, order_id: str, status: OrderStatus) -> Optional[Order]:
        await asyncio.sleep(0)
        order = self.orders.get(order_id)
        if order is None:
            return None
        self.orders[order_id] = order.model_copy(update={"status": status, "updatedAt": datetime.now(UTC)})
        return self.orders[order_id].model_copy()


class InMemoryUsers:
    """User store keyed by userId."""

    def __init__(self) -> None:
        self.users: dict[str, UserInDB] = {}

    async def create_user(self, user: UserCreate) -> UserInDB:
        if user.userId in self.users:
            raise ValueError(f"User with userId '{user.userId}' already exists")
        self.users[user.userId] = UserInDB(**user.model_dump())
        return self.users[user.userId]

    async def get_user(self, user_id: str) -> Optional[UserInDB]:
        return self.users.get(user_id)


@pytest.fixture
def catalog():
    """Empty in-memory catalog."""
    return InMemoryCatalog()


@pytest.fixture
def ledger():
    """Empty in-memory order ledger."""
    return InMemoryLedger()


@pytest.fixture
def users():
    """User store with one customer and two farmers."""
    store = InMemoryUsers()
    for user_id, role in [
        ("user_001", UserRole.CUSTOMER),
        ("farmer_001", UserRole.FARMER),
        ("farmer_002", UserRole.FARMER),
    ]:
        store.users[user_id] = UserInDB(
            userId=user_id,
            name=user_id.replace("_", " ").title(),
            email=f"{user_id}@example.com",
            phone="+919800000000",
            role=role,
        )
    return store


@pytest.fixture
def tomatoes(catalog):
    """Product{name="Tomatoes", quantity=10, price=20}."""
    return catalog.add("Tomatoes", 20, 10)


@pytest.fixture
def engine(catalog, ledger):
    """Placement engine in the default post-commit adjustment mode."""
    return OrderPlacementEngine(
        catalog,
        ledger,
        delivery_fee=Decimal("50"),
        reserve_stock_before_commit=False,
    )


@pytest.fixture
def reserving_engine(catalog, ledger):
    """Placement engine that reserves stock before writing the order."""
    return OrderPlacementEngine(
        catalog,
        ledger,
        delivery_fee=Decimal("50"),
        reserve_stock_before_commit=True,
    )
