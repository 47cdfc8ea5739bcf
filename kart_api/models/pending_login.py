"""Pending OTP login model."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from kart_api.db.base import Base


class PendingLogin(Base):
    """Latest OTP issued to a phone number, removed once verified."""

    __tablename__ = "kk_pending_logins"

    phone: Mapped[str] = mapped_column(String(10), primary_key=True)
    otp: Mapped[str] = mapped_column(String(6), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
