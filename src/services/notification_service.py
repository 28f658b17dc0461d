"""Multi-channel notification routing (email, SMS, in-app)"""

import asyncio
from typing import Any, Dict, Optional

import structlog

from src.clients.db_service_client import DatabaseServiceClient, preferences_from_user
from src.monitoring.metrics import notification_deliveries
from src.schemas.notifications import (
    DeliveryOutcome,
    DispatchResult,
    InAppNotificationRecord,
    NotificationCategory,
    NotificationPreferences,
    NotificationPriority,
)
from src.services.email_dispatcher import EmailDispatcher
from src.services.twilio_sms_service import TwilioSmsService
from src.templates.email_templates import BRAND_NAME, notification_email

logger = structlog.get_logger()

CATEGORY_PRIORITIES: Dict[str, NotificationPriority] = {
    NotificationCategory.SECURITY_ALERT.value: NotificationPriority.URGENT,
    NotificationCategory.ANALYSIS_FAILED.value: NotificationPriority.HIGH,
    NotificationCategory.PASSWORD_RESET.value: NotificationPriority.HIGH,
    NotificationCategory.ANALYSIS_COMPLETE.value: NotificationPriority.NORMAL,
    NotificationCategory.ACCOUNT_UPDATE.value: NotificationPriority.NORMAL,
    NotificationCategory.SUBSCRIPTION.value: NotificationPriority.NORMAL,
    NotificationCategory.SYSTEM_ALERT.value: NotificationPriority.NORMAL,
    NotificationCategory.WELCOME.value: NotificationPriority.LOW,
    NotificationCategory.ARTWORK_ADDED.value: NotificationPriority.LOW,
    NotificationCategory.ARTWORK_UPDATED.value: NotificationPriority.LOW,
}

CATEGORY_TITLES: Dict[str, str] = {
    NotificationCategory.WELCOME.value: f"Welcome to {BRAND_NAME}!",
    NotificationCategory.ANALYSIS_COMPLETE.value: "Analysis Complete!",
    NotificationCategory.ANALYSIS_FAILED.value: "Analysis Failed",
    NotificationCategory.SECURITY_ALERT.value: "Security Alert",
    NotificationCategory.ARTWORK_ADDED.value: "Artwork Added",
    NotificationCategory.ARTWORK_UPDATED.value: "Artwork Updated",
    NotificationCategory.ACCOUNT_UPDATE.value: "Account Updated",
    NotificationCategory.SUBSCRIPTION.value: "Subscription Update",
    NotificationCategory.SYSTEM_ALERT.value: "System Alert",
}


def _category_value(category) -> str:
    return category.value if isinstance(category, NotificationCategory) else str(category)


def get_priority_for_category(category) -> NotificationPriority:
    return CATEGORY_PRIORITIES.get(_category_value(category), NotificationPriority.NORMAL)


def get_notification_title(category) -> str:
    return CATEGORY_TITLES.get(_category_value(category), "Notification")


def extract_phone_number(user: Dict[str, Any]) -> Optional[str]:
    """User phone is stored either as {"number": ...} or as a bare string."""
    phone = user.get("phone")
    if isinstance(phone, dict):
        return phone.get("number") or None
    return phone or None


class NotificationService:
    """
    Routes one logical notification to the email, SMS and in-app channels.

    Each channel is gated by the user's preferences: the channel must be
    enabled and the category explicitly opted in. Channel failures are
    reported in the result, never raised.
    """

    def __init__(
        self,
        db_client: DatabaseServiceClient,
        email_dispatcher: EmailDispatcher,
        sms_service: TwilioSmsService,
    ):
        self.db_client = db_client
        self.email_dispatcher = email_dispatcher
        self.sms_service = sms_service

    async def get_user_preferences(self, user_id: str) -> NotificationPreferences:
        return await self.db_client.get_user_preferences(user_id)

    async def send_email_notification(
        self,
        user_id: str,
        email: str,
        category: str,
        title: str,
        message: str,
        data: Dict[str, Any],
        preferences: NotificationPreferences,
    ) -> DeliveryOutcome:
        if not preferences.email.allows(category):
            logger.info("email_notification_disabled", user_id=user_id, category=category)
            return DeliveryOutcome.disabled()

        try:
            rendered = notification_email(title, message, data)
            return await self.email_dispatcher.send_email(email, rendered)
        except Exception as e:
            logger.error("email_notification_error", user_id=user_id, error=str(e))
            return DeliveryOutcome.failed(str(e))

    async def send_sms_notification(
        self,
        user_id: str,
        phone_number: str,
        category: str,
        message: str,
        data: Dict[str, Any],
        preferences: NotificationPreferences,
    ) -> DeliveryOutcome:
        if not preferences.sms.allows(category):
            logger.info("sms_notification_disabled", user_id=user_id, category=category)
            return DeliveryOutcome.disabled()

        if not self.sms_service.configured:
            logger.warning("sms_service_unavailable", user_id=user_id)
            return DeliveryOutcome.service_unavailable()

        try:
            outcome = await self.sms_service.send_notification_sms(
                phone_number,
                get_notification_title(category),
                message,
                data,
            )
        except Exception as e:
            logger.error("sms_notification_error", user_id=user_id, error=str(e))
            return DeliveryOutcome.failed(str(e))

        if outcome.success:
            logger.info("sms_notification_sent", user_id=user_id, to=phone_number)
        else:
            logger.error("sms_notification_failed", user_id=user_id, to=phone_number, error=outcome.error)
        return outcome

    async def create_in_app_notification(
        self,
        user_id: str,
        category: str,
        title: str,
        message: str,
        data: Dict[str, Any],
        preferences: NotificationPreferences,
    ) -> DeliveryOutcome:
        if not preferences.in_app.allows(category):
            logger.info("in_app_notification_disabled", user_id=user_id, category=category)
            return DeliveryOutcome.disabled()

        record = InAppNotificationRecord(
            user_id=user_id,
            category=category,
            title=title,
            message=message,
            data=data,
            priority=get_priority_for_category(category),
        )

        try:
            created = await self.db_client.create_notification(record)
        except Exception as e:
            logger.error("in_app_notification_error", user_id=user_id, error=str(e))
            return DeliveryOutcome.failed(str(e))

        return DeliveryOutcome.sent(provider="database", notification=created)

    async def send_notification(
        self,
        user_id: str,
        category,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> DispatchResult:
        """
        Send a notification on every channel the user has opted into.

        Args:
            user_id: Target user ID in the database service
            category: NotificationCategory (or its string value)
            title: Notification title (email subject, in-app title)
            message: Notification body
            data: Extra payload (actionUrl, priority, domain IDs)

        Returns:
            DispatchResult; ``success`` is True once every channel has been
            attempted, whatever the individual outcomes
        """
        category = _category_value(category)
        data = data or {}

        try:
            user = await self.db_client.get_user(user_id)
        except Exception as e:
            logger.error("notification_user_fetch_failed", user_id=user_id, error=str(e))
            return DispatchResult.failure(str(e))

        # One lookup serves the destinations and the preferences
        preferences = preferences_from_user(user, user_id)

        email = user.get("email")
        phone_number = extract_phone_number(user)

        email_task = (
            self.send_email_notification(user_id, email, category, title, message, data, preferences)
            if email
            else _skipped()
        )
        sms_task = (
            self.send_sms_notification(user_id, phone_number, category, message, data, preferences)
            if phone_number
            else _skipped()
        )
        in_app_task = self.create_in_app_notification(
            user_id, category, title, message, data, preferences
        )

        try:
            email_outcome, sms_outcome, in_app_outcome = await asyncio.gather(
                email_task, sms_task, in_app_task
            )
        except Exception as e:
            logger.error("notification_dispatch_failed", user_id=user_id, error=str(e))
            return DispatchResult.failure(str(e))

        result = DispatchResult.from_outcomes(email_outcome, sms_outcome, in_app_outcome)
        for channel, outcome in result.results.items():
            notification_deliveries.labels(channel=channel, status=outcome.status.value).inc()

        logger.info(
            "notification_dispatched",
            user_id=user_id,
            category=category,
            summary=result.summary,
        )
        return result

    async def send_analysis_complete_notification(
        self, user_id: str, analysis: Dict[str, Any]
    ) -> DispatchResult:
        return await self.send_notification(
            user_id,
            NotificationCategory.ANALYSIS_COMPLETE,
            "Analysis Complete",
            f'Your artwork "{analysis.get("artworkTitle")}" has been analyzed successfully.',
            {
                "analysisId": analysis.get("id"),
                "artworkTitle": analysis.get("artworkTitle"),
                "accuracy": analysis.get("accuracy"),
                "type": NotificationCategory.ANALYSIS_COMPLETE.value,
            },
        )

    async def send_analysis_failed_notification(
        self, user_id: str, analysis: Dict[str, Any]
    ) -> DispatchResult:
        return await self.send_notification(
            user_id,
            NotificationCategory.ANALYSIS_FAILED,
            "Analysis Failed",
            f'We couldn\'t analyze your artwork "{analysis.get("artworkTitle")}". Please try again.',
            {
                "artworkTitle": analysis.get("artworkTitle"),
                "error": analysis.get("error"),
                "type": NotificationCategory.ANALYSIS_FAILED.value,
            },
        )

    async def send_security_alert_notification(
        self, user_id: str, alert: Dict[str, Any]
    ) -> DispatchResult:
        return await self.send_notification(
            user_id,
            NotificationCategory.SECURITY_ALERT,
            "Security Alert",
            f"Suspicious login attempt detected from {alert.get('location')}.",
            {
                "location": alert.get("location"),
                "device": alert.get("device"),
                "timestamp": alert.get("timestamp"),
                "type": NotificationCategory.SECURITY_ALERT.value,
            },
        )

    async def send_welcome_notification(
        self, user_id: str, user: Dict[str, Any]
    ) -> DispatchResult:
        return await self.send_notification(
            user_id,
            NotificationCategory.WELCOME,
            f"Welcome to {BRAND_NAME}!",
            f"Welcome {user.get('username')}! Your account has been created successfully.",
            {
                "username": user.get("username"),
                "type": NotificationCategory.WELCOME.value,
            },
        )

    async def send_artwork_added_notification(
        self, user_id: str, artwork: Dict[str, Any]
    ) -> DispatchResult:
        return await self.send_notification(
            user_id,
            NotificationCategory.ARTWORK_ADDED,
            "Artwork Added",
            f'Your artwork "{artwork.get("title")}" has been added to your collection.',
            {
                "artworkId": artwork.get("id"),
                "artworkTitle": artwork.get("title"),
                "type": NotificationCategory.ARTWORK_ADDED.value,
            },
        )

    async def send_artwork_updated_notification(
        self, user_id: str, artwork: Dict[str, Any]
    ) -> DispatchResult:
        return await self.send_notification(
            user_id,
            NotificationCategory.ARTWORK_UPDATED,
            "Artwork Updated",
            f'Your artwork "{artwork.get("title")}" has been updated.',
            {
                "artworkId": artwork.get("id"),
                "artworkTitle": artwork.get("title"),
                "type": NotificationCategory.ARTWORK_UPDATED.value,
            },
        )


async def _skipped() -> DeliveryOutcome:
    return DeliveryOutcome.skipped()
