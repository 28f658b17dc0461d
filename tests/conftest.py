"""Pytest configuration and fixtures"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient

from src.main import app
from src.api.dependencies import ServiceContainer, get_services
from src.clients.db_service_client import DatabaseServiceClient
from src.interfaces.channel_transport import EmailTransport
from src.schemas.notifications import DeliveryOutcome, NotificationPreferences, VerifyResult
from src.services.email_dispatcher import EmailDispatcher
from src.services.notification_service import NotificationService
from src.services.twilio_sms_service import TwilioSmsService


class StubEmailTransport(EmailTransport):
    """Records every send and answers with a fixed outcome"""

    def __init__(self, name="smtp", configured=True, outcome=None):
        super().__init__(configured)
        self.name = name
        self.outcome = outcome
        self.sent = []

    async def send(self, destination, subject, html_body, text_body):
        self.sent.append(
            {"to": destination, "subject": subject, "html": html_body, "text": text_body}
        )
        if self.outcome is not None:
            return self.outcome
        return DeliveryOutcome.sent(provider=self.name, message_id=f"<{len(self.sent)}@stub>")

    async def verify(self):
        return VerifyResult(success=True, message=f"{self.name} connection test successful")


def preferences_for(category, email=True, sms=False, in_app=True):
    """Stored preferences document with ``category`` opted in on every channel"""
    return {
        "email": {"enabled": email, "categories": {category: True}},
        "sms": {"enabled": sms, "categories": {category: True}},
        "inApp": {"enabled": in_app, "categories": {category: True}},
    }


@pytest.fixture
def email_transport():
    return StubEmailTransport("smtp")


@pytest.fixture
def email_dispatcher(email_transport):
    return EmailDispatcher([email_transport])


@pytest.fixture
def sms_service():
    """Configured Twilio service with its network methods mocked"""
    sms = MagicMock(spec=TwilioSmsService)
    sms.name = "twilio"
    sms.configured = True
    sms.send_notification_sms = AsyncMock(
        return_value=DeliveryOutcome.sent(provider="twilio", message_id="SM123")
    )
    sms.send_test_sms = AsyncMock(
        return_value=DeliveryOutcome.sent(provider="twilio", message_id="SM456")
    )
    sms.verify = AsyncMock(
        return_value=VerifyResult(success=True, message="Twilio connection test successful")
    )
    return sms


@pytest.fixture
def test_user():
    return {
        "_id": "user-123",
        "email": "artist@example.com",
        "username": "artist",
        "phone": {"number": "+1234567890"},
    }


@pytest.fixture
def db_client(test_user):
    client = MagicMock(spec=DatabaseServiceClient)
    client.get_user = AsyncMock(return_value=test_user)
    client.get_user_preferences = AsyncMock(return_value=NotificationPreferences.defaults())
    client.create_notification = AsyncMock(return_value={"_id": "notif-1"})
    return client


@pytest.fixture
def notification_service(db_client, email_dispatcher, sms_service):
    return NotificationService(
        db_client=db_client,
        email_dispatcher=email_dispatcher,
        sms_service=sms_service,
    )


@pytest.fixture
def services(email_dispatcher, sms_service, notification_service):
    return ServiceContainer(
        email_dispatcher=email_dispatcher,
        sms_service=sms_service,
        notification_service=notification_service,
    )


@pytest.fixture
def client(services):
    """Create test client wired to the stub services"""
    app.dependency_overrides[get_services] = lambda: services
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def stub_transport():
    """Factory for extra email transports"""
    return StubEmailTransport


@pytest.fixture
def opted_in():
    """Factory for preferences opting a category in on every channel"""
    return preferences_for
