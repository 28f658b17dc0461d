"""Configuration settings for the notification mail/SMS service"""

from pydantic_settings import BaseSettings
from typing import Optional
import os


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    SERVICE_NAME: str = "notification-mail-sms-service"
    # Hosting platforms may provide PORT dynamically
    PORT: int = int(os.getenv("PORT", "4003"))

    # Database service (users, preferences, in-app notifications)
    DB_SERVICE_URL: str = os.getenv("DB_SERVICE_URL", "http://localhost:4001")
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # Links embedded in emails
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # SMTP
    # Options: "gmail", "outlook", "hotmail", "yahoo", "custom"
    EMAIL_PROVIDER: str = os.getenv("EMAIL_PROVIDER", "gmail")
    EMAIL_USER: str = os.getenv("EMAIL_USER", "")
    EMAIL_PASSWORD: str = os.getenv("EMAIL_PASSWORD", "")
    # Only used by the "custom" provider
    EMAIL_HOST: str = os.getenv("EMAIL_HOST", "")
    EMAIL_PORT: int = int(os.getenv("EMAIL_PORT", "587"))
    EMAIL_SECURE: bool = os.getenv("EMAIL_SECURE", "false").lower() == "true"
    EMAIL_FROM: Optional[str] = os.getenv("EMAIL_FROM", None)
    EMAIL_FROM_NAME: str = os.getenv("EMAIL_FROM_NAME", "NydArt Advisor")
    SMTP_TIMEOUT_SECONDS: float = 30.0
    TEST_EMAIL: str = os.getenv("TEST_EMAIL", "test@example.com")

    # SendGrid
    SENDGRID_API_KEY: str = os.getenv("SENDGRID_API_KEY", "")
    SENDGRID_FROM_EMAIL: str = os.getenv("SENDGRID_FROM_EMAIL", "noreply@nydart-advisor.com")
    SENDGRID_FROM_NAME: str = os.getenv("SENDGRID_FROM_NAME", "NydArt Advisor")

    # Twilio
    TWILIO_ACCOUNT_SID: str = os.getenv("TWILIO_ACCOUNT_SID", "")
    TWILIO_AUTH_TOKEN: str = os.getenv("TWILIO_AUTH_TOKEN", "")
    TWILIO_PHONE_NUMBER: str = os.getenv("TWILIO_PHONE_NUMBER", "")
    TEST_PHONE_NUMBER: Optional[str] = os.getenv("TEST_PHONE_NUMBER", None)

    # Monitoring
    SENTRY_DSN: Optional[str] = os.getenv("SENTRY_DSN", None)
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    SENTRY_TRACES_SAMPLE_RATE: float = 1.0

    @property
    def email_from_address(self) -> str:
        """Sender address for SMTP mail, defaulting to the login user."""
        return self.EMAIL_FROM or self.EMAIL_USER

    def frontend_link(self, path: str) -> str:
        """Build an absolute frontend URL for the given path."""
        return f"{self.FRONTEND_URL.rstrip('/')}{path}"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
