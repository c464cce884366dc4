"""
HTTP SMS gateway channel.
"""

from typing import Optional

import httpx

from booking_engine.application.interfaces.channels import DeliveryResult
from booking_engine.config.logging import get_logger
from booking_engine.infrastructure.external.http_client import ChannelHTTPClient

logger = get_logger(__name__)

CHANNEL = "sms"


class SmsGatewayChannel:
    """Posts text messages to an SMS gateway's REST endpoint."""

    def __init__(
        self,
        gateway_url: str,
        api_key: str,
        sender: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.gateway_url = gateway_url
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout
        self.transport = transport

    async def send(self, recipient: str, message: str) -> DeliveryResult:
        body = {"from": self.sender, "to": recipient, "message": message}
        headers = {"Authorization": f"Bearer {self.api_key}"}

        async with ChannelHTTPClient(CHANNEL, self.timeout, self.transport) as client:
            response_data = await client.post_json(
                self.gateway_url, body, recipient, headers=headers
            )

        message_id = response_data.get("id")
        logger.info("SMS accepted by gateway", message_id=message_id)
        return DeliveryResult(success=True, channel=CHANNEL, external_id=message_id)
