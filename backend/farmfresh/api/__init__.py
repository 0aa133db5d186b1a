"""API package."""

from farmfresh.api.middleware import LoggingMiddleware
from farmfresh.api.routes import router

__all__ = [
    "router",
    "LoggingMiddleware",
]
