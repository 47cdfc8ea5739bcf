"""Order ledger tests: placement, listings and the optimistic status guard."""

from collections.abc import Iterator
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from kart_api.db import session as db_session
from kart_api.db.base import Base
from kart_api.main import app
from kart_api.models.order import Order
from kart_api.services.errors import InvalidInputError, NotFoundError, StaleOrderError
from kart_api.services.order_service import list_orders_by_date, list_orders_by_phone, update_order_status


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


@pytest.fixture()
def session_factory(tmp_path: Path, monkeypatch) -> sessionmaker:
    engine = _build_test_engine(tmp_path / "test_orders.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    return testing_session_local


@pytest.fixture()
def client(session_factory: sessionmaker) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


def _order_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "name": "Ravi",
        "restaurant_name": "Tony's",
        "food_order_items": [{"dish": "Margherita", "qty": 2, "price": 125}],
        "phone": "9876543210",
        "address": "12 Beach Road, Kakinada",
        "location_url": "https://maps.example.com/?q=16.98,82.24",
        "total_amount": "250.00",
    }
    payload.update(overrides)
    return payload


def _add_order(session: Session, created_at: datetime, **overrides: object) -> Order:
    fields = _order_payload(**overrides)
    order = Order(
        name=fields["name"],
        restaurant_name=fields["restaurant_name"],
        food_order_items=fields["food_order_items"],
        phone=fields["phone"],
        address=fields["address"],
        location_url=fields["location_url"],
        total_amount=Decimal(str(fields["total_amount"])),
        order_status="placed",
        created_at=created_at,
    )
    session.add(order)
    session.commit()
    session.refresh(order)
    return order


def test_order_lifecycle(client: TestClient) -> None:
    placed = client.post("/add_new_order", json=_order_payload())
    assert placed.status_code == 201
    order = placed.json()
    assert order["id"] > 0
    assert order["order_status"] == "placed"
    assert order["created_at"]

    by_phone = client.post("/get_orders_by_phone", json={"phone": "9876543210"})
    assert by_phone.json()[0]["id"] == order["id"]

    updated = client.post("/update_order_status", json={**order, "new_status": "delivered"})
    assert updated.status_code == 200
    assert updated.json()["order_status"] == "delivered"

    refreshed = client.post("/get_orders_by_phone", json={"phone": "9876543210"})
    assert refreshed.json()[0]["order_status"] == "delivered"


def test_place_order_requires_all_fields(client: TestClient) -> None:
    payload = _order_payload()
    del payload["location_url"]

    response = client.post("/add_new_order", json=payload)

    assert response.status_code == 400
    assert "location_url" in response.json()["message"]


def test_update_rejects_drifted_snapshot(client: TestClient) -> None:
    order = client.post("/add_new_order", json=_order_payload()).json()

    drifted = client.post(
        "/update_order_status",
        json={**order, "address": "Somewhere else", "new_status": "accepted"},
    )
    wrong_id = client.post("/update_order_status", json={**order, "id": order["id"] + 100, "new_status": "accepted"})
    accepted = client.post("/update_order_status", json={**order, "new_status": "accepted"})
    replayed = client.post("/update_order_status", json={**order, "new_status": "cancelled"})

    assert drifted.status_code == 404
    assert drifted.json() == {"message": "Order not found or has been modified"}
    assert wrong_id.status_code == 404
    assert accepted.status_code == 200
    assert replayed.status_code == 404


def test_update_rejects_unknown_status(client: TestClient) -> None:
    order = client.post("/add_new_order", json=_order_payload()).json()

    response = client.post("/update_order_status", json={**order, "new_status": "teleported"})

    assert response.status_code == 400


def test_orders_by_phone_newest_first(session_factory: sessionmaker) -> None:
    with session_factory() as session:
        older = _add_order(session, datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc))
        newer = _add_order(session, datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc))
        _add_order(session, datetime(2026, 3, 3, 9, 0, tzinfo=timezone.utc), phone="9000000000")

        orders = list_orders_by_phone(session, "9876543210")
        assert [order.id for order in orders] == [newer.id, older.id]


def test_orders_by_date_oldest_first(session_factory: sessionmaker, client: TestClient) -> None:
    with session_factory() as session:
        late = _add_order(session, datetime(2026, 3, 5, 20, 30, tzinfo=timezone.utc))
        early = _add_order(session, datetime(2026, 3, 5, 7, 15, tzinfo=timezone.utc))
        _add_order(session, datetime(2026, 3, 6, 0, 0, tzinfo=timezone.utc))
        _add_order(session, datetime(2026, 3, 4, 23, 59, tzinfo=timezone.utc))

        orders = list_orders_by_date(session, date(2026, 3, 5))
        expected_ids = [early.id, late.id]
        assert [order.id for order in orders] == expected_ids

    response = client.post("/get_orders_by_date", json={"date": "2026-03-05"})
    assert [row["id"] for row in response.json()] == expected_ids


def test_update_order_status_service_guard(session_factory: sessionmaker) -> None:
    with session_factory() as session:
        order = _add_order(session, datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc))
        snapshot = {**_order_payload(), "total_amount": 250, "order_status": "placed"}

        with pytest.raises(StaleOrderError):
            update_order_status(session, order.id, {**snapshot, "total_amount": "249.99"}, "accepted")
        with pytest.raises(StaleOrderError):
            update_order_status(session, order.id, {**snapshot, "food_order_items": []}, "accepted")
        with pytest.raises(NotFoundError):
            update_order_status(session, order.id + 1, snapshot, "accepted")
        with pytest.raises(InvalidInputError):
            update_order_status(session, order.id, snapshot, "lost")

        updated = update_order_status(session, order.id, snapshot, "Out for delivery")

    assert updated.order_status == "out_for_delivery"


def test_place_order_rejects_unstorable_total(client: TestClient) -> None:
    fractional = client.post("/add_new_order", json=_order_payload(total_amount="12.345"))
    oversized = client.post("/add_new_order", json=_order_payload(total_amount="100000000"))

    assert fractional.status_code == 400
    assert oversized.status_code == 400
    assert "total_amount" in oversized.json()["message"]
