"""Unit tests for the multi-channel notification router"""

import pytest
from unittest.mock import AsyncMock

from src.clients.db_service_client import DatabaseServiceError
from src.schemas.notifications import (
    DeliveryOutcome,
    DeliveryStatus,
    NotificationCategory,
    NotificationPriority,
)
from src.services.email_dispatcher import EmailDispatcher
from src.services.notification_service import (
    NotificationService,
    extract_phone_number,
    get_notification_title,
    get_priority_for_category,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "category,priority",
    [
        ("security_alert", NotificationPriority.URGENT),
        ("analysis_failed", NotificationPriority.HIGH),
        ("password_reset", NotificationPriority.HIGH),
        ("analysis_complete", NotificationPriority.NORMAL),
        ("welcome", NotificationPriority.LOW),
        ("artwork_updated", NotificationPriority.LOW),
        ("something_else", NotificationPriority.NORMAL),
    ],
)
def test_priority_for_category(category, priority):
    assert get_priority_for_category(category) == priority


@pytest.mark.unit
def test_notification_title():
    assert get_notification_title(NotificationCategory.WELCOME) == "Welcome to NydArt Advisor!"
    assert get_notification_title("analysis_complete") == "Analysis Complete!"
    assert get_notification_title("unknown") == "Notification"


@pytest.mark.unit
def test_extract_phone_number():
    assert extract_phone_number({"phone": {"number": "+33612345678"}}) == "+33612345678"
    assert extract_phone_number({"phone": "+33612345678"}) == "+33612345678"
    assert extract_phone_number({"phone": {}}) is None
    assert extract_phone_number({}) is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_disabled_channel_never_reaches_transport(
    notification_service, email_transport, sms_service, db_client
):
    """Default preferences opt no category in, so no transport is touched"""
    result = await notification_service.send_notification(
        "user-123", "analysis_complete", "Done", "Your analysis is ready"
    )

    assert result.success is True
    assert result.summary == {"email": False, "sms": False, "inApp": False}
    assert result.results["email"].status == DeliveryStatus.DISABLED
    assert result.results["sms"].status == DeliveryStatus.DISABLED
    assert result.results["inApp"].status == DeliveryStatus.DISABLED
    assert email_transport.sent == []
    sms_service.send_notification_sms.assert_not_called()
    db_client.create_notification.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_all_channels_delivered(notification_service, email_transport, sms_service, db_client, opted_in, test_user):
    test_user["notificationPreferences"] = opted_in("security_alert", sms=True)

    result = await notification_service.send_notification(
        "user-123",
        NotificationCategory.SECURITY_ALERT,
        "Security Alert",
        "New login from Paris",
        {"actionUrl": "https://app.test/security", "priority": "urgent"},
    )

    assert result.summary == {"email": True, "sms": True, "inApp": True}
    assert email_transport.sent[0]["subject"] == "Security Alert"
    assert "https://app.test/security" in email_transport.sent[0]["html"]

    sms_service.send_notification_sms.assert_awaited_once_with(
        "+1234567890",
        "Security Alert",
        "New login from Paris",
        {"actionUrl": "https://app.test/security", "priority": "urgent"},
    )

    record = db_client.create_notification.await_args.args[0]
    assert record.user_id == "user-123"
    assert record.category == "security_alert"
    assert record.priority == NotificationPriority.URGENT
    assert record.status == "pending"
    assert result.results["inApp"].provider == "database"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_user_fetched_once_per_dispatch(notification_service, db_client, opted_in, test_user):
    """Destinations and preferences come from a single user lookup"""
    test_user["notificationPreferences"] = opted_in("welcome", sms=True)

    result = await notification_service.send_notification("user-123", "welcome", "Hi", "Welcome")

    db_client.get_user.assert_awaited_once_with("user-123")
    db_client.get_user_preferences.assert_not_called()
    assert result.summary == {"email": True, "sms": True, "inApp": True}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_category_must_be_opted_in(notification_service, email_transport, test_user):
    test_user["notificationPreferences"] = {
        "email": {"enabled": True, "categories": {"welcome": False}}
    }

    result = await notification_service.send_notification("user-123", "welcome", "Hi", "Welcome")

    assert result.results["email"].status == DeliveryStatus.DISABLED
    assert email_transport.sent == []


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["yes", 1, "on", "true"])
async def test_truthy_category_value_is_not_an_opt_in(
    notification_service, email_transport, db_client, test_user, value
):
    """Only a literal true opts a category in; anything else falls back to defaults"""
    test_user["notificationPreferences"] = {
        "email": {"enabled": True, "categories": {"welcome": value}},
        "inApp": {"enabled": True, "categories": {"welcome": True}},
    }

    result = await notification_service.send_notification("user-123", "welcome", "Hi", "Welcome")

    assert result.results["email"].status == DeliveryStatus.DISABLED
    assert result.results["inApp"].status == DeliveryStatus.DISABLED
    assert email_transport.sent == []
    db_client.create_notification.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_no_email_service(db_client, sms_service, opted_in, test_user):
    test_user["notificationPreferences"] = opted_in("welcome")
    service = NotificationService(db_client, EmailDispatcher([]), sms_service)

    result = await service.send_notification("user-123", "welcome", "Hi", "Welcome")

    assert result.results["email"].status == DeliveryStatus.NO_SERVICE
    assert result.results["email"].reason == "no_service"
    assert result.results["inApp"].success is True


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sms_service_unavailable(notification_service, db_client, sms_service, opted_in, test_user):
    test_user["notificationPreferences"] = opted_in("welcome", sms=True)
    sms_service.configured = False

    result = await notification_service.send_notification("user-123", "welcome", "Hi", "Welcome")

    assert result.results["sms"].status == DeliveryStatus.SERVICE_UNAVAILABLE
    sms_service.send_notification_sms.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_missing_destinations_are_skipped(
    notification_service, db_client, email_transport, sms_service, opted_in, test_user
):
    del test_user["email"]
    del test_user["phone"]
    test_user["notificationPreferences"] = opted_in("welcome", sms=True)

    result = await notification_service.send_notification("user-123", "welcome", "Hi", "Welcome")

    assert result.results["email"].status == DeliveryStatus.SKIPPED
    assert result.results["sms"].status == DeliveryStatus.SKIPPED
    assert result.results["inApp"].status == DeliveryStatus.SENT
    assert email_transport.sent == []
    sms_service.send_notification_sms.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_channel_failure_does_not_abort_others(
    notification_service, db_client, sms_service, opted_in, test_user
):
    test_user["notificationPreferences"] = opted_in("welcome", sms=True)
    db_client.create_notification.side_effect = DatabaseServiceError("Database service returned 503")
    sms_service.send_notification_sms = AsyncMock(
        return_value=DeliveryOutcome.failed("Twilio API returned 400", provider="twilio")
    )

    result = await notification_service.send_notification("user-123", "welcome", "Hi", "Welcome")

    assert result.success is True
    assert result.summary == {"email": True, "sms": False, "inApp": False}
    assert result.results["inApp"].error == "Database service returned 503"
    assert result.results["sms"].status == DeliveryStatus.FAILED


@pytest.mark.unit
@pytest.mark.asyncio
async def test_user_fetch_failure(notification_service, db_client, email_transport):
    db_client.get_user.side_effect = DatabaseServiceError("Failed to fetch user user-123: timeout")

    result = await notification_service.send_notification("user-123", "welcome", "Hi", "Welcome")

    assert result.success is False
    assert result.error == "Failed to fetch user user-123: timeout"
    assert result.results is None
    assert email_transport.sent == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_analysis_complete_wrapper(notification_service, db_client, opted_in, test_user):
    test_user["notificationPreferences"] = opted_in("analysis_complete")

    await notification_service.send_analysis_complete_notification(
        "user-123", {"id": "an-1", "artworkTitle": "Sunrise", "accuracy": 0.93}
    )

    record = db_client.create_notification.await_args.args[0]
    assert record.title == "Analysis Complete"
    assert record.message == 'Your artwork "Sunrise" has been analyzed successfully.'
    assert record.data == {
        "analysisId": "an-1",
        "artworkTitle": "Sunrise",
        "accuracy": 0.93,
        "type": "analysis_complete",
    }


@pytest.mark.unit
@pytest.mark.asyncio
async def test_security_alert_wrapper(notification_service, db_client, opted_in, test_user):
    test_user["notificationPreferences"] = opted_in("security_alert")

    await notification_service.send_security_alert_notification(
        "user-123", {"location": "Lyon", "device": "Chrome", "timestamp": "2024-01-01"}
    )

    record = db_client.create_notification.await_args.args[0]
    assert record.message == "Suspicious login attempt detected from Lyon."
    assert record.priority == NotificationPriority.URGENT


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,payload,category,title,message,data",
    [
        (
            "send_welcome_notification",
            {"username": "artist"},
            "welcome",
            "Welcome to NydArt Advisor!",
            "Welcome artist! Your account has been created successfully.",
            {"username": "artist", "type": "welcome"},
        ),
        (
            "send_analysis_failed_notification",
            {"artworkTitle": "Sunrise", "error": "Image too small"},
            "analysis_failed",
            "Analysis Failed",
            'We couldn\'t analyze your artwork "Sunrise". Please try again.',
            {"artworkTitle": "Sunrise", "error": "Image too small", "type": "analysis_failed"},
        ),
        (
            "send_artwork_added_notification",
            {"id": "art-1", "title": "Sunrise"},
            "artwork_added",
            "Artwork Added",
            'Your artwork "Sunrise" has been added to your collection.',
            {"artworkId": "art-1", "artworkTitle": "Sunrise", "type": "artwork_added"},
        ),
        (
            "send_artwork_updated_notification",
            {"id": "art-1", "title": "Sunrise"},
            "artwork_updated",
            "Artwork Updated",
            'Your artwork "Sunrise" has been updated.',
            {"artworkId": "art-1", "artworkTitle": "Sunrise", "type": "artwork_updated"},
        ),
    ],
)
async def test_domain_wrappers(
    notification_service, db_client, opted_in, test_user,
    method, payload, category, title, message, data,
):
    test_user["notificationPreferences"] = opted_in(category)

    await getattr(notification_service, method)("user-123", payload)

    record = db_client.create_notification.await_args.args[0]
    assert record.category == category
    assert record.title == title
    assert record.message == message
    assert record.data == data
