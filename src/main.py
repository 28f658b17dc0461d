"""Main FastAPI application for the notification mail/SMS service"""

from fastapi import Depends, FastAPI
from fastapi.responses import PlainTextResponse
import structlog

from src.api.dependencies import ServiceContainer, get_services
from src.api.routes import emails, notifications
from src.monitoring.logging_config import configure_logging
from src.monitoring.sentry_config import init_sentry
from src.monitoring.metrics import router as metrics_router
from src.config import settings

configure_logging(settings.LOG_LEVEL, json_logs=settings.APP_ENV == "production")
logger = structlog.get_logger()

# Initialize Sentry if DSN is provided
init_sentry()

app = FastAPI(
    title="Notification Mail & SMS Service API",
    description="Email, SMS and in-app notification dispatch",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Include routers
app.include_router(emails.router, tags=["emails"])
app.include_router(notifications.router, tags=["notifications"])
app.include_router(metrics_router)


@app.get("/", response_class=PlainTextResponse)
async def root():
    return "Notification Service is running"


@app.get("/health")
async def health_check(services: ServiceContainer = Depends(get_services)):
    """Health check endpoint"""
    email_status = services.email_dispatcher.status()
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "emailServices": {
            # SMTP is reported under its historical key
            "nodemailer": email_status.get("smtp", "not configured"),
            "sendgrid": email_status.get("sendgrid", "not configured"),
        },
        "smsService": "configured" if services.sms_service.configured else "not configured",
    }


@app.on_event("startup")
async def startup_event():
    """Startup event handler"""
    services = get_services()
    logger.info(
        "Notification service starting up",
        port=settings.PORT,
        email_services=services.email_dispatcher.status(),
        sms_configured=services.sms_service.configured,
    )


@app.on_event("shutdown")
async def shutdown_event():
    """Shutdown event handler"""
    logger.info("Notification service shutting down")
