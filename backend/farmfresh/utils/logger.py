"""Logging configuration."""

import logging
import sys
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

from farmfresh.config import get_settings

settings = get_settings()

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_QUIET_LOGGERS = ("uvicorn", "uvicorn.access", "motor", "pymongo")


def build_formatter(log_format: str) -> logging.Formatter:
    """Formatter for the configured output format.

    JSON records carry the service name and environment on every line, plus
    any ``extra`` fields passed at the call site (request_id, order_number,
    product_id, tier, ...).
    """
    if log_format == "json":
        return JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt=DATE_FORMAT,
            rename_fields={"levelname": "level", "name": "logger"},
            static_fields={"service": settings.app_name, "environment": settings.environment},
        )
    return logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure application logging.

    Args:
        level: Overrides ``LOG_LEVEL`` for this process (scripts pass ``DEBUG``
            when run with ``--verbose``).
    """
    level_name = (level or settings.log_level).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(build_formatter(settings.log_format))
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.info("Logging configured: level=%s, format=%s", level_name, settings.log_format)
