"""Database service client (users, preferences, in-app notifications)"""

from typing import Any, Dict

import httpx
import structlog
from pydantic import ValidationError

from src.schemas.notifications import InAppNotificationRecord, NotificationPreferences

logger = structlog.get_logger()


class DatabaseServiceError(Exception):
    """Raised when the database service cannot be reached or rejects a call"""

    pass


def preferences_from_user(user: Dict[str, Any], user_id: str = "") -> NotificationPreferences:
    """Stored preferences of a user document, or the defaults when absent or malformed."""
    stored = user.get("notificationPreferences")
    if not stored:
        return NotificationPreferences.defaults()

    try:
        return NotificationPreferences.model_validate(stored)
    except ValidationError as e:
        logger.warning("user_preferences_invalid", user_id=user_id, error=str(e))
        return NotificationPreferences.defaults()


class DatabaseServiceClient:
    """HTTP client for the external database service"""

    def __init__(self, base_url: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings) -> "DatabaseServiceClient":
        return cls(base_url=settings.DB_SERVICE_URL, timeout=settings.HTTP_TIMEOUT_SECONDS)

    async def get_user(self, user_id: str) -> Dict[str, Any]:
        """Fetch a user document; raises DatabaseServiceError on failure."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(f"{self.base_url}/users/{user_id}")
                response.raise_for_status()
                user = response.json()
        except httpx.HTTPStatusError as e:
            raise DatabaseServiceError(
                f"Database service returned {e.response.status_code} for user {user_id}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise DatabaseServiceError(f"Failed to fetch user {user_id}: {e}") from e

        if not isinstance(user, dict):
            raise DatabaseServiceError(f"Malformed user document for {user_id}")
        return user

    async def get_user_preferences(self, user_id: str) -> NotificationPreferences:
        """
        Get a user's notification preferences.

        Never raises: any failure (network, non-2xx, malformed document) falls
        back to the default preferences so delivery is not blocked by the
        database service.
        """
        try:
            user = await self.get_user(user_id)
        except DatabaseServiceError as e:
            logger.warning(
                "user_preferences_fetch_failed",
                user_id=user_id,
                error=str(e),
            )
            return NotificationPreferences.defaults()

        return preferences_from_user(user, user_id)

    async def create_notification(self, record: InAppNotificationRecord) -> Any:
        """Persist an in-app notification; raises DatabaseServiceError on failure."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/notifications",
                    json=record.to_payload(),
                )
                response.raise_for_status()
                created = response.json() if response.content else {}
        except httpx.HTTPStatusError as e:
            raise DatabaseServiceError(
                f"Database service returned {e.response.status_code} creating notification"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise DatabaseServiceError(f"Failed to create notification: {e}") from e

        logger.info(
            "in_app_notification_created",
            user_id=record.user_id,
            category=record.category,
        )
        return created
