"""
Notification channel interfaces.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class DeliveryResult:
    """Result reported back by a channel adapter."""

    success: bool
    channel: str
    recipient_count: int = 1
    external_id: Optional[str] = None
    error_message: Optional[str] = None


@dataclass
class PushPayload:
    """Provider-neutral push message."""

    contents: Dict[str, str]
    data: Dict[str, Any] = field(default_factory=dict)
    sound: Optional[str] = None


class ChannelAdapterInterface(ABC):
    """Outbound push, SMS and e-mail delivery."""

    @abstractmethod
    async def send_push(
        self,
        recipients: List[str],
        payload: PushPayload,
        send_after: Optional[datetime] = None,
    ) -> DeliveryResult:
        """Send a push message to devices tagged with the recipients' e-mails."""
        pass

    @abstractmethod
    async def send_sms(self, recipient: str, message: str) -> DeliveryResult:
        """Send a text message to one phone number."""
        pass

    @abstractmethod
    async def send_email(
        self, recipient: str, subject: str, template: str, context: Dict[str, Any]
    ) -> DeliveryResult:
        """Send a templated e-mail to one address."""
        pass
