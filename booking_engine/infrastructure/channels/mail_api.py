"""
Transactional mail API channel.
"""

from typing import Any, Dict, Optional

import httpx

from booking_engine.application.interfaces.channels import DeliveryResult
from booking_engine.config.logging import get_logger
from booking_engine.infrastructure.external.http_client import ChannelHTTPClient

logger = get_logger(__name__)

CHANNEL = "email"


class MailApiChannel:
    """Hands templated e-mails to a transactional mail service."""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        from_address: str,
        from_name: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.from_address = from_address
        self.from_name = from_name
        self.timeout = timeout
        self.transport = transport

    async def send(
        self, recipient: str, subject: str, template: str, context: Dict[str, Any]
    ) -> DeliveryResult:
        body = {
            "from": {"email": self.from_address, "name": self.from_name},
            "to": [{"email": recipient, "name": context.get("user_name", "")}],
            "subject": subject,
            "template": template,
            "variables": context,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        async with ChannelHTTPClient(CHANNEL, self.timeout, self.transport) as client:
            response_data = await client.post_json(
                self.api_url, body, recipient, headers=headers
            )

        logger.info("E-mail accepted by mail service", template=template)
        return DeliveryResult(
            success=True, channel=CHANNEL, external_id=response_data.get("id")
        )
