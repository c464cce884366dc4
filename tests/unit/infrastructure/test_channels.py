"""
Unit tests for the outbound notification channels.
"""

import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from booking_engine.application.interfaces.channels import PushPayload
from booking_engine.domain.exceptions.delivery_error import DeliveryFailedError
from booking_engine.infrastructure.channels.factory import create_channel_adapter
from booking_engine.infrastructure.channels.mail_api import MailApiChannel
from booking_engine.infrastructure.channels.mock import MockChannel
from booking_engine.infrastructure.channels.onesignal import OneSignalPushChannel
from booking_engine.infrastructure.channels.router import ChannelRouter
from booking_engine.infrastructure.channels.sms_gateway import SmsGatewayChannel


class RecordingTransport(httpx.MockTransport):
    """Mock transport that keeps the requests it served."""

    def __init__(self, status_code=200, payload=None, error=None):
        self.requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            if error is not None:
                raise error
            return httpx.Response(status_code, json=payload or {"id": "msg-1"})

        super().__init__(handler)

    def last_body(self):
        return json.loads(self.requests[-1].content)


class TestOneSignalPushChannel:
    """Test OneSignal request building and error mapping."""

    @pytest.fixture
    def payload(self):
        return PushPayload(
            contents={"en": "New booking"}, data={"job_id": "42"}, sound="emergency_booking"
        )

    def make_channel(self, transport):
        return OneSignalPushChannel("app-id", "secret", title="Bookings", transport=transport)

    def test_build_request(self, payload):
        channel = self.make_channel(None)
        send_after = datetime(2024, 1, 2, 8, 0, tzinfo=timezone(timedelta(hours=1)))

        body = channel.build_request(["Anna@Example.com", "bo@example.com"], payload, send_after)

        assert body["app_id"] == "app-id"
        assert body["tags"] == [
            {"key": "email", "relation": "=", "value": "anna@example.com"},
            {"operator": "OR"},
            {"key": "email", "relation": "=", "value": "bo@example.com"},
        ]
        assert body["headings"] == {"en": "Bookings"}
        assert body["android_sound"] == "emergency_booking"
        assert body["ios_sound"] == "emergency_booking.mp3"
        assert body["send_after"] == "2024-01-02 07:00:00 GMT+0000"

    def test_default_sound(self):
        body = self.make_channel(None).build_request(["a@example.com"], PushPayload({"en": "x"}))
        assert body["ios_sound"] == "default"
        assert "send_after" not in body

    @pytest.mark.asyncio
    async def test_send(self, payload):
        transport = RecordingTransport(payload={"id": "push-9"})

        result = await self.make_channel(transport).send(["a@example.com"], payload)

        assert result.success is True
        assert result.external_id == "push-9"
        assert transport.requests[0].headers["Authorization"] == "Basic secret"
        assert transport.last_body()["contents"] == {"en": "New booking"}

    @pytest.mark.asyncio
    async def test_provider_errors_are_unsuccessful_results(self, payload):
        transport = RecordingTransport(payload={"errors": ["All included players are not subscribed"]})

        result = await self.make_channel(transport).send(["a@example.com"], payload)

        assert result.success is False
        assert "not subscribed" in result.error_message

    @pytest.mark.asyncio
    async def test_http_error_raises(self, payload):
        transport = RecordingTransport(status_code=500)

        with pytest.raises(DeliveryFailedError) as exc_info:
            await self.make_channel(transport).send(["a@example.com"], payload)
        assert exc_info.value.channel == "push"

    @pytest.mark.asyncio
    async def test_network_error_raises(self, payload):
        transport = RecordingTransport(error=httpx.ConnectError("connection refused"))

        with pytest.raises(DeliveryFailedError, match="Network error"):
            await self.make_channel(transport).send(["a@example.com"], payload)


class TestSmsAndMailChannels:
    @pytest.mark.asyncio
    async def test_sms(self):
        transport = RecordingTransport(payload={"id": "sms-1"})
        channel = SmsGatewayChannel(
            "https://sms.example.com/send", "key", "+46700000000", transport=transport
        )

        result = await channel.send("+46701234567", "hello")

        assert result.external_id == "sms-1"
        assert transport.last_body() == {
            "from": "+46700000000",
            "to": "+46701234567",
            "message": "hello",
        }

    @pytest.mark.asyncio
    async def test_sms_rejected(self):
        channel = SmsGatewayChannel(
            "https://sms.example.com/send", "key", "+4670", transport=RecordingTransport(400)
        )
        with pytest.raises(DeliveryFailedError):
            await channel.send("+46701234567", "hello")

    @pytest.mark.asyncio
    async def test_mail(self):
        transport = RecordingTransport()
        channel = MailApiChannel(
            "https://mail.example.com/send",
            "key",
            "bookings@example.com",
            "Bookings",
            transport=transport,
        )

        result = await channel.send(
            "anna@example.com", "Subject", "emails.job-accepted", {"user_name": "Anna"}
        )

        assert result.success is True
        body = transport.last_body()
        assert body["to"] == [{"email": "anna@example.com", "name": "Anna"}]
        assert body["template"] == "emails.job-accepted"
        assert body["variables"] == {"user_name": "Anna"}


class TestChannelFactory:
    """Test create_channel_adapter."""

    def test_mock_when_forced(self, test_settings):
        assert isinstance(create_channel_adapter(test_settings), MockChannel)

    def test_mock_when_credentials_missing(self, test_settings):
        settings = test_settings.model_copy(update={"MOCK_CHANNELS": False})
        assert isinstance(create_channel_adapter(settings), MockChannel)

    def test_router_when_configured(self, test_settings):
        settings = test_settings.model_copy(
            update={
                "MOCK_CHANNELS": False,
                "ONESIGNAL_APP_ID": "app",
                "ONESIGNAL_API_KEY": "key",
                "SMS_GATEWAY_URL": "https://sms.example.com",
                "SMS_GATEWAY_API_KEY": "key",
                "MAIL_API_URL": "https://mail.example.com",
                "MAIL_API_KEY": "key",
            }
        )

        adapter = create_channel_adapter(settings)

        assert isinstance(adapter, ChannelRouter)
        assert adapter.push.app_id == "app"
        assert adapter.sms.gateway_url == "https://sms.example.com"

    @pytest.mark.asyncio
    async def test_router_routes_by_channel(self):
        transport = RecordingTransport()
        router = ChannelRouter(
            push=OneSignalPushChannel("app", "key", transport=transport),
            sms=SmsGatewayChannel("https://sms.example.com", "key", "+4670", transport=transport),
            email=MailApiChannel(
                "https://mail.example.com", "key", "a@example.com", "A", transport=transport
            ),
        )

        await router.send_sms("+46701234567", "hi")
        await router.send_email("b@example.com", "s", "t", {})

        assert [r.url.host for r in transport.requests] == [
            "sms.example.com",
            "mail.example.com",
        ]
