"""Order ledger: placing orders, lookups and guarded status updates."""

import logging
from collections.abc import Mapping
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from kart_api.db.session import transaction
from kart_api.models.order import Order
from kart_api.services.errors import InvalidInputError, NotFoundError, StaleOrderError
from kart_api.services.order_status import DEFAULT_ORDER_STATUS, normalize_status
from kart_api.utils.time import day_window_utc

logger = logging.getLogger(__name__)

ORDER_FIELDS: tuple[str, ...] = (
    "name",
    "restaurant_name",
    "food_order_items",
    "phone",
    "address",
    "location_url",
    "total_amount",
)
GUARDED_FIELDS: tuple[str, ...] = ORDER_FIELDS + ("order_status",)


def _as_decimal(value: Any) -> Decimal | None:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def _matches_snapshot(order: Order, snapshot: Mapping[str, Any]) -> bool:
    """Return whether every guarded field of ``order`` equals the caller's snapshot."""
    for field in GUARDED_FIELDS:
        if field not in snapshot:
            return False
        stored = getattr(order, field)
        supplied = snapshot[field]
        if field == "total_amount":
            if _as_decimal(supplied) != _as_decimal(stored):
                return False
        elif stored != supplied:
            return False
    return True


def place_order(
    db: Session,
    *,
    name: str,
    restaurant_name: str,
    food_order_items: Any,
    phone: str,
    address: str,
    location_url: str,
    total_amount: Decimal,
) -> Order:
    """Insert a new order in the initial status and return the stored row."""
    order = Order(
        name=name,
        restaurant_name=restaurant_name,
        food_order_items=food_order_items,
        phone=phone,
        address=address,
        location_url=location_url,
        total_amount=total_amount,
        order_status=DEFAULT_ORDER_STATUS,
    )
    with transaction(db):
        db.add(order)
    db.refresh(order)
    logger.info("Placed order id=%s for restaurant %r", order.id, restaurant_name)
    return order


def list_orders_by_phone(db: Session, phone: str) -> list[Order]:
    """Return a customer's orders, most recent first."""
    return list(
        db.scalars(
            select(Order)
            .where(Order.phone == phone)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
    )


def list_orders_by_date(db: Session, day: date) -> list[Order]:
    """Return orders created on ``day`` (UTC), oldest first."""
    start, end = day_window_utc(day)
    return list(
        db.scalars(
            select(Order)
            .where(Order.created_at >= start, Order.created_at < end)
            .order_by(Order.created_at.asc(), Order.id.asc())
        )
    )


def update_order_status(db: Session, order_id: int, snapshot: Mapping[str, Any], new_status: str) -> Order:
    """Move an order to ``new_status`` if the caller's snapshot is still current.

    ``snapshot`` must carry every order field plus ``order_status`` exactly as
    the caller last read them; any drift rejects the write.
    """
    try:
        status = normalize_status(new_status)
    except ValueError as exc:
        raise InvalidInputError(str(exc)) from exc

    with transaction(db):
        order: Order | None = db.scalar(select(Order).where(Order.id == order_id).with_for_update())
        if order is None:
            raise NotFoundError("Order not found")
        if not _matches_snapshot(order, snapshot):
            logger.warning("Rejected stale status update for order id=%s", order_id)
            raise StaleOrderError("Order not found or has been modified")
        previous_status = order.order_status
        order.order_status = status

    db.refresh(order)
    logger.info("Order id=%s status %s -> %s", order_id, previous_status, status)
    return order
