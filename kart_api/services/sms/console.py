"""Development gateway that logs OTPs instead of sending them."""

import logging
import uuid

from kart_api.services.sms.base import BaseSmsGateway, SmsResult

logger = logging.getLogger(__name__)


class ConsoleSmsGateway(BaseSmsGateway):
    """Writes the OTP to the application log."""

    @property
    def provider_name(self) -> str:
        return "console"

    def send_otp(self, phone: str, otp: str) -> SmsResult:
        message_id = f"console_{uuid.uuid4().hex[:12]}"
        logger.info("OTP for %s: %s (ID: %s)", phone, otp, message_id)
        return SmsResult(success=True, message_id=message_id, provider=self.provider_name)
