"""OTP request/verify flow tests."""

from collections.abc import Iterator
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from kart_api.core.config import settings
from kart_api.core.security import verify_token
from kart_api.db import session as db_session
from kart_api.db.base import Base
from kart_api.main import app
from kart_api.models.pending_login import PendingLogin
from kart_api.services import otp_service
from kart_api.services.errors import IncorrectOtpError, InvalidInputError, NotFoundError
from kart_api.services.sms import BaseSmsGateway, SmsResult, get_sms_gateway

PHONE = "9876543210"


class RecordingGateway(BaseSmsGateway):
    """Gateway double that records every OTP it is asked to deliver."""

    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.sent: list[tuple[str, str]] = []

    @property
    def provider_name(self) -> str:
        return "recording"

    def send_otp(self, phone: str, otp: str) -> SmsResult:
        self.sent.append((phone, otp))
        if not self.succeed:
            return SmsResult(success=False, error_message="Gateway down", provider=self.provider_name)
        return SmsResult(success=True, message_id=f"msg-{len(self.sent)}", provider=self.provider_name)


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


@pytest.fixture()
def session_factory(tmp_path: Path, monkeypatch) -> sessionmaker:
    engine = _build_test_engine(tmp_path / "test_otp.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    return testing_session_local


@pytest.fixture()
def gateway() -> Iterator[RecordingGateway]:
    recording = RecordingGateway()
    app.dependency_overrides[get_sms_gateway] = lambda: recording
    yield recording
    app.dependency_overrides.pop(get_sms_gateway, None)


@pytest.fixture()
def client(session_factory: sessionmaker, gateway: RecordingGateway) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


def _fixed_codes(monkeypatch, *codes: str) -> None:
    remaining = iter(codes)
    monkeypatch.setattr(otp_service, "generate_otp", lambda: next(remaining))


def test_generate_otp_is_six_digits() -> None:
    for _ in range(50):
        code = otp_service.generate_otp()
        assert len(code) == 6
        assert 100000 <= int(code) <= 999999


def test_send_and_verify_is_single_use(client: TestClient, gateway: RecordingGateway) -> None:
    sent = client.post("/send-otp", json={"phoneNumber": PHONE})
    assert sent.status_code == 200
    assert sent.json() == {"message": "OTP sent successfully", "verificationId": "msg-1"}
    [(phone, code)] = gateway.sent
    assert phone == PHONE

    verified = client.post("/verify-otp", json={"phoneNumber": PHONE, "otp": code})
    replayed = client.post("/verify-otp", json={"phoneNumber": PHONE, "otp": code})

    assert verified.status_code == 200
    assert verified.json()["message"] == "OTP verified successfully"
    assert verify_token(verified.json()["access_token"])["sub"] == PHONE
    assert replayed.status_code == 404
    assert replayed.json() == {"message": "No OTP found for this number"}


def test_second_request_overwrites_first_code(
    client: TestClient, session_factory: sessionmaker, monkeypatch
) -> None:
    _fixed_codes(monkeypatch, "111111", "222222")

    client.post("/send-otp", json={"phoneNumber": PHONE})
    client.post("/send-otp", json={"phoneNumber": PHONE})
    with session_factory() as session:
        rows = session.scalars(select(PendingLogin)).all()
        assert [(row.phone, row.otp) for row in rows] == [(PHONE, "222222")]

    stale = client.post("/verify-otp", json={"phoneNumber": PHONE, "otp": "111111"})
    fresh = client.post("/verify-otp", json={"phoneNumber": PHONE, "otp": "222222"})

    assert stale.status_code == 400
    assert stale.json() == {"message": "Incorrect OTP"}
    assert fresh.status_code == 200


def test_incorrect_otp_keeps_pending_row(client: TestClient, monkeypatch) -> None:
    _fixed_codes(monkeypatch, "123456")
    client.post("/send-otp", json={"phoneNumber": PHONE})

    wrong = client.post("/verify-otp", json={"phoneNumber": PHONE, "otp": "654321"})
    right = client.post("/verify-otp", json={"phoneNumber": PHONE, "otp": "123456"})

    assert wrong.status_code == 400
    assert right.status_code == 200


def test_padded_otp_is_incorrect(client: TestClient, monkeypatch) -> None:
    _fixed_codes(monkeypatch, "123456")
    client.post("/send-otp", json={"phoneNumber": PHONE})

    padded = client.post("/verify-otp", json={"phoneNumber": PHONE, "otp": " 123456 "})
    exact = client.post("/verify-otp", json={"phoneNumber": PHONE, "otp": "123456"})

    assert padded.status_code == 400
    assert padded.json() == {"message": "Incorrect OTP"}
    assert exact.status_code == 200


def test_unexpected_gateway_error_returns_json_500(session_factory: sessionmaker) -> None:
    class BrokenGateway(RecordingGateway):
        def send_otp(self, phone: str, otp: str) -> SmsResult:
            raise RuntimeError("gateway misconfigured")

    app.dependency_overrides[get_sms_gateway] = lambda: BrokenGateway()
    try:
        with TestClient(app, raise_server_exceptions=False) as test_client:
            response = test_client.post("/send-otp", json={"phoneNumber": PHONE})
    finally:
        app.dependency_overrides.pop(get_sms_gateway, None)

    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error"}


def test_send_otp_rejects_invalid_phone(client: TestClient, gateway: RecordingGateway) -> None:
    for phone in ("12345", "98765432101", "98765abcde", "३२१०३२१०३२"):
        response = client.post("/send-otp", json={"phoneNumber": phone})
        assert response.status_code == 400
        assert response.json() == {"message": "Please enter a valid phone number"}

    missing = client.post("/send-otp", json={})
    assert missing.status_code == 400
    assert gateway.sent == []


def test_gateway_failure_still_persists_otp(
    client: TestClient, gateway: RecordingGateway, session_factory: sessionmaker
) -> None:
    gateway.succeed = False

    response = client.post("/send-otp", json={"phoneNumber": PHONE})

    assert response.status_code == 500
    assert response.json() == {"message": "Gateway down"}
    [(_, code)] = gateway.sent
    with session_factory() as session:
        stored = session.get(PendingLogin, PHONE)
        assert stored is not None
        assert stored.otp == code

    verified = client.post("/verify-otp", json={"phoneNumber": PHONE, "otp": code})
    assert verified.status_code == 200


def test_verify_without_pending_otp(client: TestClient) -> None:
    response = client.post("/verify-otp", json={"phoneNumber": PHONE, "otp": "123456"})

    assert response.status_code == 404


def test_expired_otp_is_discarded(session_factory: sessionmaker, monkeypatch) -> None:
    monkeypatch.setattr(settings, "otp_ttl_seconds", 600)
    issued_at = datetime(2026, 5, 1, 10, 0, tzinfo=timezone.utc)

    with session_factory() as session:
        otp_service.store_otp(session, PHONE, "123456", now=issued_at)

        with pytest.raises(NotFoundError, match="expired"):
            otp_service.verify_otp(session, PHONE, "123456", now=issued_at + timedelta(minutes=11))
        with pytest.raises(NotFoundError, match="No OTP found"):
            otp_service.verify_otp(session, PHONE, "123456", now=issued_at + timedelta(minutes=12))


def test_expiry_can_be_disabled(session_factory: sessionmaker, monkeypatch) -> None:
    monkeypatch.setattr(settings, "otp_ttl_seconds", 0)
    issued_at = datetime(2026, 5, 1, 10, 0, tzinfo=timezone.utc)

    with session_factory() as session:
        otp_service.store_otp(session, PHONE, "123456", now=issued_at)
        otp_service.verify_otp(session, PHONE, "123456", now=issued_at + timedelta(days=3))

        assert _pending_count(session) == 0


def test_service_rejects_bad_input(session_factory: sessionmaker) -> None:
    with session_factory() as session:
        with pytest.raises(InvalidInputError):
            otp_service.request_otp(session, RecordingGateway(), "phone")

        otp_service.store_otp(session, PHONE, "123456")
        with pytest.raises(IncorrectOtpError):
            otp_service.verify_otp(session, PHONE, "000000")
        assert _pending_count(session) == 1


def test_my_orders_requires_verified_phone(client: TestClient, monkeypatch) -> None:
    _fixed_codes(monkeypatch, "424242")
    client.post(
        "/add_new_order",
        json={
            "name": "Ravi",
            "restaurant_name": "Tony's",
            "food_order_items": [{"dish": "Margherita", "qty": 1}],
            "phone": PHONE,
            "address": "12 Beach Road",
            "location_url": "https://maps.example.com/?q=1,2",
            "total_amount": 125,
        },
    )
    client.post("/send-otp", json={"phoneNumber": PHONE})
    token = client.post("/verify-otp", json={"phoneNumber": PHONE, "otp": "424242"}).json()["access_token"]

    anonymous = client.get("/my_orders")
    bad_token = client.get("/my_orders", headers={"Authorization": "Bearer not-a-token"})
    mine = client.get("/my_orders", headers={"Authorization": f"Bearer {token}"})

    assert anonymous.status_code == 401
    assert bad_token.status_code == 401
    assert mine.status_code == 200
    assert [order["phone"] for order in mine.json()] == [PHONE]


def _pending_count(session: Session) -> int:
    return len(session.scalars(select(PendingLogin)).all())
