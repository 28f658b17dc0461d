"""Notification data model: categories, preferences and delivery outcomes"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class NotificationCategory(str, Enum):
    SECURITY_ALERT = "security_alert"
    ANALYSIS_COMPLETE = "analysis_complete"
    ANALYSIS_FAILED = "analysis_failed"
    PASSWORD_RESET = "password_reset"
    ACCOUNT_UPDATE = "account_update"
    SUBSCRIPTION = "subscription"
    WELCOME = "welcome"
    ARTWORK_ADDED = "artwork_added"
    ARTWORK_UPDATED = "artwork_updated"
    SYSTEM_ALERT = "system_alert"


class NotificationPriority(str, Enum):
    URGENT = "urgent"
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"


class Channel(str, Enum):
    EMAIL = "email"
    SMS = "sms"
    IN_APP = "inApp"


class DeliveryStatus(str, Enum):
    """Tag of a per-channel delivery outcome."""

    SENT = "sent"
    DISABLED = "disabled"
    NO_SERVICE = "no_service"
    SERVICE_UNAVAILABLE = "service_unavailable"
    SKIPPED = "skipped"
    FAILED = "failed"


class ChannelPreference(BaseModel):
    enabled: bool = False
    categories: Dict[str, StrictBool] = Field(default_factory=dict)

    def allows(self, category: str) -> bool:
        """Channel on and category explicitly opted in."""
        return self.enabled and self.categories.get(category) is True


class NotificationPreferences(BaseModel):
    """Per-user channel preferences as stored by the database service.

    Channels are opt-out (email and in-app default on) while categories are
    opt-in: a category missing from a channel's map is treated as disabled.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: ChannelPreference = Field(default_factory=lambda: ChannelPreference(enabled=True))
    sms: ChannelPreference = Field(default_factory=lambda: ChannelPreference(enabled=False))
    in_app: ChannelPreference = Field(
        default_factory=lambda: ChannelPreference(enabled=True),
        alias="inApp",
    )

    @classmethod
    def defaults(cls) -> "NotificationPreferences":
        return cls()


class NotificationRequest(BaseModel):
    """Body of a generic category-based notification request."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId", min_length=1)
    category: NotificationCategory
    title: str
    message: str
    data: Dict[str, Any] = Field(default_factory=dict)


class InAppNotificationRecord(BaseModel):
    """Record forwarded to the database service for the in-app channel."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    type: str = "in_app"
    category: str
    title: str
    message: str
    data: Dict[str, Any] = Field(default_factory=dict)
    status: str = "pending"
    priority: NotificationPriority = NotificationPriority.NORMAL

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class DeliveryOutcome(BaseModel):
    """Result of one channel attempt.

    Always build through the named constructors so that ``success``,
    ``status`` and ``reason`` stay consistent.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    status: DeliveryStatus
    reason: Optional[str] = None
    error: Optional[str] = None
    message_id: Optional[str] = Field(default=None, alias="messageId")
    provider: Optional[str] = None
    notification: Optional[Any] = None

    @classmethod
    def sent(
        cls,
        provider: Optional[str] = None,
        message_id: Optional[str] = None,
        notification: Optional[Any] = None,
    ) -> "DeliveryOutcome":
        return cls(
            success=True,
            status=DeliveryStatus.SENT,
            provider=provider,
            message_id=message_id,
            notification=notification,
        )

    @classmethod
    def disabled(cls) -> "DeliveryOutcome":
        return cls._not_attempted(DeliveryStatus.DISABLED)

    @classmethod
    def no_service(cls) -> "DeliveryOutcome":
        return cls._not_attempted(DeliveryStatus.NO_SERVICE)

    @classmethod
    def service_unavailable(cls) -> "DeliveryOutcome":
        return cls._not_attempted(DeliveryStatus.SERVICE_UNAVAILABLE)

    @classmethod
    def skipped(cls) -> "DeliveryOutcome":
        """No destination (missing email or phone) for this channel."""
        return cls(success=False, status=DeliveryStatus.SKIPPED)

    @classmethod
    def failed(cls, error: str, provider: Optional[str] = None) -> "DeliveryOutcome":
        return cls(success=False, status=DeliveryStatus.FAILED, error=error, provider=provider)

    @classmethod
    def _not_attempted(cls, status: DeliveryStatus) -> "DeliveryOutcome":
        return cls(success=False, status=status, reason=status.value)

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DispatchResult(BaseModel):
    """Aggregate result of a multi-channel notification."""

    success: bool
    results: Optional[Dict[str, DeliveryOutcome]] = None
    summary: Optional[Dict[str, bool]] = None
    error: Optional[str] = None

    @classmethod
    def from_outcomes(
        cls,
        email: DeliveryOutcome,
        sms: DeliveryOutcome,
        in_app: DeliveryOutcome,
    ) -> "DispatchResult":
        results = {
            Channel.EMAIL.value: email,
            Channel.SMS.value: sms,
            Channel.IN_APP.value: in_app,
        }
        return cls(
            success=True,
            results=results,
            summary={channel: outcome.success for channel, outcome in results.items()},
        )

    @classmethod
    def failure(cls, error: str) -> "DispatchResult":
        return cls(success=False, error=error)

    def to_response(self) -> Dict[str, Any]:
        response: Dict[str, Any] = {"success": self.success}
        if self.results is not None:
            response["results"] = {
                channel: outcome.to_response() for channel, outcome in self.results.items()
            }
            response["summary"] = self.summary
        if self.error is not None:
            response["error"] = self.error
        return response


class VerifyResult(BaseModel):
    """Outcome of a transport connectivity check."""

    success: bool
    message: str
    error: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
