"""Utilities package."""

from sweetbite.utils.helpers import (
    format_price,
    generate_timestamp_id,
    generate_uuid,
    utc_now,
)
from sweetbite.utils.logger import setup_logging

__all__ = [
    "setup_logging",
    "generate_uuid",
    "generate_timestamp_id",
    "utc_now",
    "format_price",
]
