"""SMS gateway factory.

Returns the gateway selected by ``SMS_PROVIDER``.
"""

import logging
from functools import lru_cache

from kart_api.core.config import settings
from kart_api.services.sms.base import BaseSmsGateway, SmsResult
from kart_api.services.sms.console import ConsoleSmsGateway
from kart_api.services.sms.fast2sms import Fast2SmsGateway

logger = logging.getLogger(__name__)


@lru_cache()
def get_sms_gateway() -> BaseSmsGateway:
    """Get the configured SMS gateway."""
    provider = settings.sms_provider.strip().lower()
    if provider == "fast2sms":
        logger.info("SMS gateway: Fast2SMS")
        return Fast2SmsGateway()
    if provider != "console":
        logger.warning("Unknown SMS_PROVIDER %r; falling back to console gateway", settings.sms_provider)
    logger.info("SMS gateway: console")
    return ConsoleSmsGateway()


def reset_sms_gateway() -> None:
    """Clear the cached gateway instance."""
    get_sms_gateway.cache_clear()


__all__ = [
    "get_sms_gateway",
    "reset_sms_gateway",
    "BaseSmsGateway",
    "SmsResult",
]
