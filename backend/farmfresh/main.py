"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from bson.errors import InvalidId
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import DuplicateKeyError

from farmfresh.api.middleware import LoggingMiddleware
from farmfresh.api.routes import router
from farmfresh.config import get_settings
from farmfresh.database.mongodb import mongodb
from farmfresh.errors import CatalogStoreError
from farmfresh.models.request import ErrorResponse
from farmfresh.utils.logger import setup_logging

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting application...")
    try:
        await mongodb.connect()
        logger.info(
            "Database connection established; orders use %s stock adjustment, delivery fee %s",
            "reserve-before-commit" if settings.reserve_stock_before_commit else "post-commit",
            settings.delivery_fee,
        )

        yield

    finally:
        logger.info("Shutting down application...")
        await mongodb.disconnect()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Organic produce marketplace connecting farmers with customers",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)

app.include_router(router)


@app.exception_handler(DuplicateKeyError)
async def duplicate_key_handler(request: Request, exc: DuplicateKeyError) -> JSONResponse:
    """Unique index violations are client errors."""
    logger.warning("Duplicate key on %s: %s", request.url.path, exc)
    message = "Duplicate field value entered"
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": message, "errors": [message]},
    )


@app.exception_handler(InvalidId)
async def invalid_id_handler(request: Request, exc: InvalidId) -> JSONResponse:
    """Malformed ObjectIds are reported as missing resources."""
    message = "Invalid ID format"
    return JSONResponse(
        status_code=404,
        content={"success": False, "message": message, "errors": [message]},
    )


@app.exception_handler(CatalogStoreError)
@app.exception_handler(ConnectionError)
async def store_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    """The catalog or database could not be reached."""
    logger.error("Store unavailable on %s: %s", request.url.path, exc)
    message = "Service temporarily unavailable"
    return JSONResponse(
        status_code=503,
        content={"success": False, "message": message, "errors": [message]},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler."""
    logger.error("Unhandled exception: %s", exc, exc_info=True)
    body = ErrorResponse(error="Internal Server Error", detail="An unexpected error occurred")
    return JSONResponse(status_code=500, content=body.model_dump())


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "farmfresh.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
