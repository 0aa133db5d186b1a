"""Utility helper functions."""

import random
import time
import uuid
from datetime import UTC, datetime
from typing import Optional

ORDER_NUMBER_PREFIX = "ORD"


def generate_request_id() -> str:
    """Generate a unique request identifier."""
    return uuid.uuid4().hex


def generate_order_number(
    timestamp_ms: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """Generate a human-readable order number.

    Format is ``ORD`` + epoch milliseconds + a zero-padded 3 digit random
    suffix, e.g. ``ORD1718000000000042``. The generator alone does not
    guarantee uniqueness; the orders collection carries a unique index and
    callers regenerate on conflict.
    """
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    suffix = (rng or random).randrange(1000)
    return f"{ORDER_NUMBER_PREFIX}{timestamp_ms}{suffix:03d}"


def utc_now() -> datetime:
    """Get the current timezone-aware UTC time."""
    return datetime.now(UTC)


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """Truncate text to maximum length."""
    if len(text) <= max_length:
        return text
    return text[: max_length - len(suffix)] + suffix
