"""One-time passcode issue and verification for phone-number logins."""

import logging
import re
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from kart_api.core.config import settings
from kart_api.db.dialect import conflict_insert
from kart_api.db.session import transaction
from kart_api.models.pending_login import PendingLogin
from kart_api.services.errors import IncorrectOtpError, InternalFailureError, InvalidInputError, NotFoundError
from kart_api.services.sms import BaseSmsGateway

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"[0-9]{10}")
OTP_MIN: int = 100000
OTP_MAX: int = 999999


@dataclass(frozen=True)
class OtpDispatch:
    otp: str
    message_id: str | None


def generate_otp() -> str:
    """Return a six-digit code in the 100000-999999 range."""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def validate_phone(phone: str) -> str:
    if not PHONE_PATTERN.fullmatch(phone or ""):
        raise InvalidInputError("Please enter a valid phone number")
    return phone


def store_otp(db: Session, phone: str, otp: str, now: datetime | None = None) -> None:
    """Insert or overwrite the pending OTP for ``phone``."""
    issued_at: datetime = now or datetime.now(timezone.utc)
    stmt = conflict_insert(db, PendingLogin).values(phone=phone, otp=otp, created_at=issued_at)
    stmt = stmt.on_conflict_do_update(
        index_elements=["phone"],
        set_={"otp": stmt.excluded.otp, "created_at": stmt.excluded.created_at},
    )
    with transaction(db):
        db.execute(stmt)
    logger.info("OTP stored for phone %s", phone)


def request_otp(db: Session, gateway: BaseSmsGateway, phone: str) -> OtpDispatch:
    """Issue a new OTP for ``phone`` and hand it to the SMS gateway.

    The code is persisted before delivery, so a gateway failure still leaves a
    verifiable OTP behind; the failure is reported to the caller.
    """
    validate_phone(phone)
    otp = generate_otp()
    store_otp(db, phone, otp)

    result = gateway.send_otp(phone, otp)
    if not result.success:
        logger.warning("OTP delivery via %s failed for %s: %s", result.provider, phone, result.error_message)
        raise InternalFailureError(result.error_message or "Error sending OTP")
    return OtpDispatch(otp=otp, message_id=result.message_id)


def _is_expired(created_at: datetime, now: datetime) -> bool:
    if settings.otp_ttl_seconds <= 0:
        return False
    # SQLite hands back naive timestamps; they are stored as UTC.
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return now - created_at > timedelta(seconds=settings.otp_ttl_seconds)


def verify_otp(db: Session, phone: str, otp: str, now: datetime | None = None) -> None:
    """Check ``otp`` against the pending login for ``phone`` and consume it on match."""
    checked_at: datetime = now or datetime.now(timezone.utc)
    with transaction(db):
        pending: PendingLogin | None = db.scalar(select(PendingLogin).where(PendingLogin.phone == phone))
        if pending is None:
            raise NotFoundError("No OTP found for this number")

        if not _is_expired(pending.created_at, checked_at):
            if not secrets.compare_digest(pending.otp.encode(), str(otp).encode()):
                logger.warning("Incorrect OTP submitted for phone %s", phone)
                raise IncorrectOtpError("Incorrect OTP")

            consumed = db.execute(
                delete(PendingLogin).where(PendingLogin.phone == phone, PendingLogin.otp == pending.otp),
                execution_options={"synchronize_session": False},
            )
            if consumed.rowcount == 0:
                raise NotFoundError("No OTP found for this number")
            logger.info("OTP verified for phone %s", phone)
            return

        db.execute(
            delete(PendingLogin).where(PendingLogin.phone == phone),
            execution_options={"synchronize_session": False},
        )

    logger.info("Expired OTP discarded for phone %s", phone)
    raise NotFoundError("OTP has expired")
