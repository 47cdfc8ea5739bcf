"""SMS gateway interface used to deliver login OTPs."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class SmsResult:
    """Result from handing an OTP to a gateway."""

    success: bool
    message_id: str | None = None
    error_message: str | None = None
    provider: str = "unknown"


class BaseSmsGateway(ABC):
    """Abstract base class for SMS gateways."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""

    @abstractmethod
    def send_otp(self, phone: str, otp: str) -> SmsResult:
        """Deliver ``otp`` to ``phone``; never raises for delivery failures."""
