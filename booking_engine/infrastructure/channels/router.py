"""
Channel adapter combining the push, SMS and e-mail transports.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from booking_engine.application.interfaces.channels import (
    ChannelAdapterInterface,
    DeliveryResult,
    PushPayload,
)
from booking_engine.infrastructure.channels.mail_api import MailApiChannel
from booking_engine.infrastructure.channels.onesignal import OneSignalPushChannel
from booking_engine.infrastructure.channels.sms_gateway import SmsGatewayChannel


class ChannelRouter(ChannelAdapterInterface):
    """Routes each delivery request to its transport."""

    def __init__(
        self,
        push: OneSignalPushChannel,
        sms: SmsGatewayChannel,
        email: MailApiChannel,
    ):
        self.push = push
        self.sms = sms
        self.email = email

    async def send_push(
        self,
        recipients: List[str],
        payload: PushPayload,
        send_after: Optional[datetime] = None,
    ) -> DeliveryResult:
        return await self.push.send(recipients, payload, send_after)

    async def send_sms(self, recipient: str, message: str) -> DeliveryResult:
        return await self.sms.send(recipient, message)

    async def send_email(
        self, recipient: str, subject: str, template: str, context: Dict[str, Any]
    ) -> DeliveryResult:
        return await self.email.send(recipient, subject, template, context)
