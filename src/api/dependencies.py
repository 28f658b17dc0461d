"""Service wiring for the API layer"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends

from src.clients.db_service_client import DatabaseServiceClient
from src.config import Settings, settings
from src.services.email_dispatcher import EmailDispatcher
from src.services.notification_service import NotificationService
from src.services.sendgrid_email_service import SendGridEmailService
from src.services.smtp_email_service import SmtpEmailService
from src.services.twilio_sms_service import TwilioSmsService


@dataclass
class ServiceContainer:
    email_dispatcher: EmailDispatcher
    sms_service: TwilioSmsService
    notification_service: NotificationService


def build_services(config: Settings) -> ServiceContainer:
    """Resolve every transport from configuration, once."""
    email_dispatcher = EmailDispatcher(
        [
            SmtpEmailService.from_settings(config),
            SendGridEmailService.from_settings(config),
        ]
    )
    sms_service = TwilioSmsService.from_settings(config)
    notification_service = NotificationService(
        db_client=DatabaseServiceClient.from_settings(config),
        email_dispatcher=email_dispatcher,
        sms_service=sms_service,
    )
    return ServiceContainer(
        email_dispatcher=email_dispatcher,
        sms_service=sms_service,
        notification_service=notification_service,
    )


# Singleton, built on first use
_services: Optional[ServiceContainer] = None


def get_services() -> ServiceContainer:
    """Get the service container (singleton)."""
    global _services

    if _services is None:
        _services = build_services(settings)

    return _services


def get_email_dispatcher(services: ServiceContainer = Depends(get_services)) -> EmailDispatcher:
    return services.email_dispatcher


def get_sms_service(services: ServiceContainer = Depends(get_services)) -> TwilioSmsService:
    return services.sms_service


def get_notification_service(
    services: ServiceContainer = Depends(get_services),
) -> NotificationService:
    return services.notification_service
