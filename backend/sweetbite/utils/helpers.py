"""Utility helper functions."""

import time
import uuid
from datetime import UTC, datetime
from collections.abc import Container


def generate_uuid() -> str:
    """Generate a unique UUID."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Get the current timezone-aware UTC time."""
    return datetime.now(UTC)


def generate_timestamp_id(taken: Container[str] = ()) -> str:
    """Generate a millisecond timestamp id for local-only records.

    Bumps the value until it no longer collides with an id in ``taken``.
    """
    value = time.time_ns() // 1_000_000
    while str(value) in taken:
        value += 1
    return str(value)


def format_price(amount: int) -> str:
    """Format an integer amount in rupiah, e.g. ``Rp 25.000``."""
    return "Rp " + f"{amount:,}".replace(",", ".")
