"""Fast2SMS gateway client."""

import logging

import httpx

from kart_api.core.config import settings
from kart_api.services.sms.base import BaseSmsGateway, SmsResult

logger = logging.getLogger(__name__)


class Fast2SmsGateway(BaseSmsGateway):
    """Sends OTPs through the Fast2SMS ``otp`` route."""

    def __init__(
        self,
        base_url: str | None = None,
        authorization: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.fast2sms_base_url
        self.authorization = authorization if authorization is not None else settings.fast2sms_authorization
        self.timeout = timeout or settings.sms_timeout_seconds
        self.transport = transport
        if not self.authorization:
            logger.warning("Fast2SMS authorization key not configured")

    @property
    def provider_name(self) -> str:
        return "fast2sms"

    def send_otp(self, phone: str, otp: str) -> SmsResult:
        if not self.authorization:
            return SmsResult(success=False, error_message="Fast2SMS not configured", provider=self.provider_name)

        params: dict[str, str] = {
            "authorization": self.authorization,
            "route": "otp",
            "variables_values": otp,
            "flash": "0",
            "numbers": phone,
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(self.base_url, params=params)
            payload = response.json()
            if not isinstance(payload, dict):
                payload = {}
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            logger.error("Fast2SMS request failed for %s: %s", phone, exc)
            return SmsResult(success=False, error_message="SMS gateway unreachable", provider=self.provider_name)

        if response.is_success and (payload.get("return") is True or payload.get("status") == "success"):
            message_id = payload.get("request_id") or payload.get("verification_id")
            logger.info("OTP SMS accepted for %s (ID: %s)", phone, message_id)
            return SmsResult(success=True, message_id=message_id, provider=self.provider_name)

        error_message = payload.get("message") or f"Gateway responded with HTTP {response.status_code}"
        if isinstance(error_message, list):
            error_message = "; ".join(str(part) for part in error_message)
        logger.warning("Fast2SMS rejected OTP for %s: %s", phone, error_message)
        return SmsResult(success=False, error_message=str(error_message), provider=self.provider_name)
