"""API routes for the marketplace."""

import logging
from typing import Optional

from fastapi import APIRouter, Header, HTTPException, Query, status
from fastapi.responses import JSONResponse

from farmfresh.config import get_settings
from farmfresh.database.mongodb import mongodb
from farmfresh.errors import (
    InvalidStatusTransition,
    OrderNotFound,
    OrderValidationError,
    PermissionDenied,
    PersistenceFailure,
)
from farmfresh.models.order import Order
from farmfresh.models.product import ProductCreate
from farmfresh.models.request import (
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
from farmfresh.services.catalog_service import catalog_service
from farmfresh.services.order_service import order_service
from farmfresh.services.user_service import user_service

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix=settings.api_prefix)


async def _require_user(user_id: str, role: Optional[UserRole] = None, denied: str = "Access denied") -> UserInDB:
    """Look up the calling user and check their role."""
    user = await user_service.get_user(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User not found: {user_id}",
        )
    if role is not None and user.role != role:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=denied)
    return user


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    mongodb_status = "connected" if mongodb.is_connected else "disconnected"
    return HealthResponse(
        status="healthy" if mongodb_status == "connected" else "degraded",
        version=settings.app_version,
        services={"mongodb": mongodb_status},
    )


# ── Users ─────────────────────────────────────────────────────────────────────


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(user: UserCreate) -> UserResponse:
    """Create a new customer or farmer."""
    try:
        created_user = await user_service.create_user(user)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return UserResponse(**created_user.model_dump())


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(user_id: str) -> UserResponse:
    """Get user by ID."""
    user = await _require_user(user_id)
    return UserResponse(**user.model_dump())


# ── Products ──────────────────────────────────────────────────────────────────


@router.get("/products", response_model=ProductListResponse)
async def list_products() -> ProductListResponse:
    """List the catalog, newest first."""
    products = await catalog_service.list_products()
    return ProductListResponse(data=products, count=len(products))


@router.get("/products/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    """Get a single product."""
    product = await catalog_service.get_product(product_id)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return ProductResponse(data=product)


@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product: ProductCreate,
    user_id: str = Header(..., alias="X-User-ID"),
) -> ProductResponse:
    """Add a product to the catalog (farmers only)."""
    farmer = await _require_user(user_id, UserRole.FARMER, "Only farmers can add products")
    created = await catalog_service.create_product(farmer.userId, product)
    return ProductResponse(message="Product added successfully", data=created)


@router.get("/recommendations/trending", response_model=TrendingResponse)
async def trending_products(limit: Optional[int] = Query(None, ge=1, le=50)) -> TrendingResponse:
    """Recently listed, in-stock products for anonymous visitors."""
    products = await catalog_service.trending(limit)
    return TrendingResponse(trendingProducts=products, count=len(products))


# ── Orders ────────────────────────────────────────────────────────────────────


@router.post(
    "/orders",
    response_model=PlaceOrderResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": OrderValidationResponse}},
)
async def place_order(
    request: PlaceOrderRequest,
    user_id: str = Header(..., alias="X-User-ID"),
) -> PlaceOrderResponse | JSONResponse:
    """Place an order (customers only).

    Every line is validated before anything is written. When any line fails,
    the response lists all failed lines together with the current catalog
    availability, and no order is created.

    Headers:
        X-User-ID: Customer identifier
    """
    customer = await _require_user(user_id, UserRole.CUSTOMER, "Only customers can place orders")

    try:
        order = await order_service.place_order(
            customer.userId,
            request.items,
            delivery_address=request.deliveryAddress,
            notes=request.notes,
            payment_method=request.paymentMethod,
        )
    except OrderValidationError as e:
        body = OrderValidationResponse(
            errors=e.report.errors,
            failures=e.report.failures,
            availableProducts=e.report.availableProducts,
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=body.model_dump(mode="json", by_alias=True),
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PersistenceFailure as e:
        logger.error("Order placement failed for %s: %s", customer.userId, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error during order creation",
        )

    return PlaceOrderResponse(order=order)


@router.get("/orders/my-orders", response_model=list[Order])
async def my_orders(user_id: str = Header(..., alias="X-User-ID")) -> list[Order]:
    """Orders placed by the calling customer."""
    customer = await _require_user(user_id, UserRole.CUSTOMER)
    return await order_service.list_customer_orders(customer.userId)


@router.get("/orders/farmer-orders", response_model=list[Order])
async def farmer_orders(user_id: str = Header(..., alias="X-User-ID")) -> list[Order]:
    """Orders containing the calling farmer's products, limited to their lines."""
    farmer = await _require_user(user_id, UserRole.FARMER)
    return await order_service.list_farmer_orders(farmer.userId)


@router.patch("/orders/{order_id}/status", response_model=OrderStatusResponse)
async def update_order_status(
    order_id: str,
    update: OrderStatusUpdate,
    user_id: str = Header(..., alias="X-User-ID"),
) -> OrderStatusResponse:
    """Advance or cancel an order (farmers with items in the order only)."""
    farmer = await _require_user(user_id, UserRole.FARMER, "Only farmers can update order status")

    try:
        order = await order_service.update_status(order_id, farmer.userId, update.status)
    except OrderNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    except PermissionDenied as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return OrderStatusResponse(order=order)
