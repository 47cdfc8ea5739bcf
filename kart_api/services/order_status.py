"""Order status values."""

from __future__ import annotations

ORDER_STATUSES: list[str] = ["placed", "accepted", "preparing", "out_for_delivery", "delivered", "cancelled"]
DEFAULT_ORDER_STATUS: str = ORDER_STATUSES[0]


def normalize_status(value: str) -> str:
    """Return the canonical status for ``value`` or raise ``ValueError``."""
    normalized = str(value or "").strip().lower().replace(" ", "_")
    if normalized not in ORDER_STATUSES:
        raise ValueError(f"Invalid order status: {value}")
    return normalized
