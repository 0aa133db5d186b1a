"""Utilities package."""

from farmfresh.utils.helpers import (
    generate_order_number,
    generate_request_id,
    truncate_text,
    utc_now,
)
from farmfresh.utils.logger import setup_logging

__all__ = [
    "setup_logging",
    "generate_order_number",
    "generate_request_id",
    "truncate_text",
    "utc_now",
]
