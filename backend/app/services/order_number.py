"""Human-facing order number generation."""

import secrets
from datetime import UTC, datetime

SUFFIX_DIGITS = 6


def generate_order_number(now: datetime) -> str:
    """Build an order number such as ``20261019153000482913``.

    A UTC ``YYYYMMDDHHMMSS`` prefix keeps numbers sortable by creation time;
    the random suffix separates orders created within the same second.
    Uniqueness itself is enforced by the ``uq_orders_order_number`` constraint.
    """
    timestamp = now.astimezone(UTC).strftime("%Y%m%d%H%M%S")
    suffix = secrets.randbelow(10**SUFFIX_DIGITS)
    return f"{timestamp}{suffix:0{SUFFIX_DIGITS}d}"
