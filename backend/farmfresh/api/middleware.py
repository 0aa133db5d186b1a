"""API middleware for request processing."""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from farmfresh.utils.helpers import generate_request_id

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging requests and responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log details."""
        start_time = time.monotonic()
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        request.state.request_id = request_id

        logger.info(
            "Request: %s %s",
            request.method,
            request.url.path,
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "user_id": request.headers.get("X-User-ID", "anonymous"),
                "client": request.client.host if request.client else "unknown",
            },
        )

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.monotonic() - start_time
            logger.error(
                "Request failed after %.3fs: %s",
                process_time,
                e,
                extra={"request_id": request_id, "process_time_s": round(process_time, 3)},
            )
            raise

        process_time = time.monotonic() - start_time
        logger.info(
            "Response: %s in %.3fs",
            response.status_code,
            process_time,
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "process_time_s": round(process_time, 3),
            },
        )

        response.headers["X-Process-Time"] = f"{process_time:.3f}"
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
