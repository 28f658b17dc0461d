"""Sentry error tracking"""

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration

from src.config import settings


def init_sentry():
    """Initialize Sentry when SENTRY_DSN is set; a no-op otherwise."""
    if not settings.SENTRY_DSN:
        return

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        integrations=[FastApiIntegration()],
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        environment=settings.ENVIRONMENT,
        server_name=settings.SERVICE_NAME,
        # Request bodies carry email addresses and phone numbers
        send_default_pii=False,
    )
