"""
Recording channel for development and tests.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import uuid4

from booking_engine.application.interfaces.channels import (
    ChannelAdapterInterface,
    DeliveryResult,
    PushPayload,
)
from booking_engine.config.logging import get_logger

logger = get_logger(__name__)


@dataclass
class SentMessage:
    channel: str
    recipients: List[str]
    body: Any
    send_after: Optional[datetime] = None
    extra: Dict[str, Any] = field(default_factory=dict)


class MockChannel(ChannelAdapterInterface):
    """Accepts every message and keeps it in memory."""

    def __init__(self):
        self.sent: List[SentMessage] = []

    async def send_push(
        self,
        recipients: List[str],
        payload: PushPayload,
        send_after: Optional[datetime] = None,
    ) -> DeliveryResult:
        self.sent.append(
            SentMessage("push", list(recipients), payload, send_after, {"sound": payload.sound})
        )
        logger.info("Mock push recorded", recipients=len(recipients), delayed=bool(send_after))
        return self._accepted("push", len(recipients))

    async def send_sms(self, recipient: str, message: str) -> DeliveryResult:
        self.sent.append(SentMessage("sms", [recipient], message))
        logger.info("Mock SMS recorded")
        return self._accepted("sms")

    async def send_email(
        self, recipient: str, subject: str, template: str, context: Dict[str, Any]
    ) -> DeliveryResult:
        self.sent.append(
            SentMessage("email", [recipient], subject, extra={"template": template, **context})
        )
        logger.info("Mock e-mail recorded", template=template)
        return self._accepted("email")

    def by_channel(self, channel: str) -> List[SentMessage]:
        return [message for message in self.sent if message.channel == channel]

    @staticmethod
    def _accepted(channel: str, count: int = 1) -> DeliveryResult:
        return DeliveryResult(
            success=True,
            channel=channel,
            recipient_count=count,
            external_id=f"mock_{uuid4().hex[:8]}",
        )
