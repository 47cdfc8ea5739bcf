"""Order endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from kart_api.core.security import get_current_phone
from kart_api.db.session import get_db
from kart_api.models.order import Order
from kart_api.schemas.order import (
    OrderCreate,
    OrderResponse,
    OrdersByDateRequest,
    OrdersByPhoneRequest,
    OrderStatusUpdate,
)
from kart_api.services.order_service import (
    list_orders_by_date,
    list_orders_by_phone,
    place_order,
    update_order_status,
)

router: APIRouter = APIRouter()


@router.post("/add_new_order", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(payload: OrderCreate, db: Session = Depends(get_db)) -> Order:
    """Place a new order."""
    return place_order(db, **payload.model_dump())


@router.post("/get_orders_by_phone", response_model=list[OrderResponse])
def get_orders_by_phone(payload: OrdersByPhoneRequest, db: Session = Depends(get_db)) -> list[Order]:
    """Return a customer's orders, newest first."""
    return list_orders_by_phone(db, payload.phone)


@router.post("/get_orders_by_date", response_model=list[OrderResponse])
def get_orders_by_date(payload: OrdersByDateRequest, db: Session = Depends(get_db)) -> list[Order]:
    """Return orders placed on a calendar day, oldest first."""
    return list_orders_by_date(db, payload.order_date)


@router.get("/my_orders", response_model=list[OrderResponse])
def get_my_orders(
    phone: str = Depends(get_current_phone),
    db: Session = Depends(get_db),
) -> list[Order]:
    """Return orders for the phone number that logged in with an OTP."""
    return list_orders_by_phone(db, phone)


@router.post("/update_order_status", response_model=OrderResponse)
def change_order_status(payload: OrderStatusUpdate, db: Session = Depends(get_db)) -> Order:
    """Update an order's status if the submitted snapshot still matches the stored order."""
    snapshot = payload.model_dump(exclude={"id", "new_status"})
    return update_order_status(db, payload.id, snapshot, payload.new_status)
