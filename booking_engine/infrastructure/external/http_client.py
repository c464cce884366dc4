"""
HTTP client shared by the outbound notification channels.
"""

import time
from typing import Any, Dict, Optional

import httpx

from booking_engine.config.logging import get_logger
from booking_engine.domain.exceptions.delivery_error import DeliveryFailedError

logger = get_logger(__name__)


class ChannelHTTPClient:
    """
    JSON-over-HTTP client for one delivery channel.

    Network failures and non-2xx answers are raised as DeliveryFailedError
    tagged with the channel and recipient, which the dispatcher records
    per recipient.
    """

    def __init__(
        self,
        channel: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.channel = channel
        self.timeout = timeout
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "ChannelHTTPClient":
        self.client = httpx.AsyncClient(timeout=self.timeout, transport=self.transport)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client:
            await self.client.aclose()

    async def post_json(
        self,
        url: str,
        body: Dict[str, Any],
        recipient: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """POST ``body`` and return the decoded JSON answer."""
        started = time.perf_counter()

        try:
            response = await self.client.post(url, json=body, headers=headers)
        except httpx.HTTPError as e:
            logger.error(
                "Channel request failed",
                channel=self.channel,
                url=url,
                error=str(e),
                elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            raise DeliveryFailedError(self.channel, recipient, f"Network error: {e}") from e

        logger.debug(
            "Channel request completed",
            channel=self.channel,
            url=url,
            status_code=response.status_code,
            elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
        )

        if response.status_code >= 400:
            raise DeliveryFailedError(
                self.channel, recipient, f"HTTP {response.status_code}: {response.text}"
            )
        return response.json() if response.content else {}
