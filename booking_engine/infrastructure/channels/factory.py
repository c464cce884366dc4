"""
Channel adapter factory.
"""

from booking_engine.application.interfaces.channels import ChannelAdapterInterface
from booking_engine.config.logging import get_logger
from booking_engine.config.settings import Settings
from booking_engine.infrastructure.channels.mail_api import MailApiChannel
from booking_engine.infrastructure.channels.mock import MockChannel
from booking_engine.infrastructure.channels.onesignal import OneSignalPushChannel
from booking_engine.infrastructure.channels.router import ChannelRouter
from booking_engine.infrastructure.channels.sms_gateway import SmsGatewayChannel

logger = get_logger(__name__)


def create_channel_adapter(settings: Settings) -> ChannelAdapterInterface:
    """Build the configured channel adapter; mock unless every transport is configured."""
    configured = all(
        [
            settings.ONESIGNAL_APP_ID,
            settings.ONESIGNAL_API_KEY,
            settings.SMS_GATEWAY_URL,
            settings.SMS_GATEWAY_API_KEY,
            settings.MAIL_API_URL,
            settings.MAIL_API_KEY,
        ]
    )
    if settings.MOCK_CHANNELS:
        logger.info("Using mock notification channel")
        return MockChannel()
    if not configured:
        logger.warning("Channel credentials missing, notifications will only be recorded")
        return MockChannel()

    timeout = float(settings.CHANNEL_REQUEST_TIMEOUT)
    return ChannelRouter(
        push=OneSignalPushChannel(
            app_id=settings.ONESIGNAL_APP_ID,
            api_key=settings.ONESIGNAL_API_KEY,
            api_url=settings.ONESIGNAL_API_URL,
            title=settings.APP_NAME,
            timeout=timeout,
        ),
        sms=SmsGatewayChannel(
            gateway_url=settings.SMS_GATEWAY_URL,
            api_key=settings.SMS_GATEWAY_API_KEY,
            sender=settings.SMS_SENDER_NUMBER,
            timeout=timeout,
        ),
        email=MailApiChannel(
            api_url=settings.MAIL_API_URL,
            api_key=settings.MAIL_API_KEY,
            from_address=settings.MAIL_FROM_ADDRESS,
            from_name=settings.MAIL_FROM_NAME,
            timeout=timeout,
        ),
    )
