"""
OneSignal push channel.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from booking_engine.application.interfaces.channels import DeliveryResult, PushPayload
from booking_engine.config.logging import get_logger
from booking_engine.infrastructure.external.http_client import ChannelHTTPClient

logger = get_logger(__name__)

CHANNEL = "push"


class OneSignalPushChannel:
    """Sends pushes to devices tagged with the recipients' e-mail addresses."""

    def __init__(
        self,
        app_id: str,
        api_key: str,
        api_url: str = "https://onesignal.com/api/v1/notifications",
        title: str = "Interpreter Booking Engine",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.app_id = app_id
        self.api_key = api_key
        self.api_url = api_url
        self.title = title
        self.timeout = timeout
        self.transport = transport

    def build_request(
        self,
        recipients: List[str],
        payload: PushPayload,
        send_after: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """OneSignal notification body for the given recipients."""
        sound = payload.sound or "default"
        body = {
            "app_id": self.app_id,
            "tags": self._email_tags(recipients),
            "data": payload.data,
            "headings": {locale: self.title for locale in payload.contents},
            "contents": payload.contents,
            "ios_badgeType": "Increase",
            "ios_badgeCount": 1,
            "android_sound": sound,
            "ios_sound": sound if sound == "default" else f"{sound}.mp3",
        }
        if send_after is not None:
            body["send_after"] = send_after.astimezone(timezone.utc).strftime(
                "%Y-%m-%d %H:%M:%S GMT+0000"
            )
        return body

    async def send(
        self,
        recipients: List[str],
        payload: PushPayload,
        send_after: Optional[datetime] = None,
    ) -> DeliveryResult:
        body = self.build_request(recipients, payload, send_after)
        headers = {"Authorization": f"Basic {self.api_key}"}
        async with ChannelHTTPClient(CHANNEL, self.timeout, self.transport) as client:
            response_data = await client.post_json(
                self.api_url, body, ",".join(recipients), headers=headers
            )

        # OneSignal answers 200 with an error list when no device matched
        if response_data.get("errors"):
            return DeliveryResult(
                success=False,
                channel=CHANNEL,
                recipient_count=len(recipients),
                error_message=str(response_data["errors"]),
            )

        logger.info(
            "Push accepted by OneSignal",
            notification_id=response_data.get("id"),
            recipients=len(recipients),
            scheduled=send_after is not None,
        )
        return DeliveryResult(
            success=True,
            channel=CHANNEL,
            recipient_count=len(recipients),
            external_id=response_data.get("id"),
        )

    @staticmethod
    def _email_tags(recipients: List[str]) -> List[Dict[str, str]]:
        tags = []
        for email in recipients:
            if tags:
                tags.append({"operator": "OR"})
            tags.append({"key": "email", "relation": "=", "value": email.lower()})
        return tags
