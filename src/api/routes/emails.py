"""Transactional email routes (password reset, welcome, security alert)"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from src.api.dependencies import get_email_dispatcher
from src.config import settings
from src.monitoring.metrics import email_requests
from src.services.email_dispatcher import EmailDispatcher
from src.templates.email_templates import (
    RenderedEmail,
    diagnostic_email,
    password_reset_email,
    security_alert_email,
    welcome_email,
)

logger = structlog.get_logger()
router = APIRouter()

NO_EMAIL_SERVICE = {
    "success": False,
    "message": "No email service configured",
    "error": "Neither SMTP nor SendGrid is configured",
}


class PasswordResetRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    reset_token: Optional[str] = Field(default=None, alias="resetToken")


class WelcomeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    username: Optional[str] = None
    login_link: Optional[str] = Field(default=None, alias="loginLink")


class SecurityAlertRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    username: Optional[str] = None
    login_time: Optional[str] = Field(default=None, alias="loginTime")
    device_info: Optional[str] = Field(default=None, alias="deviceInfo")
    location: Optional[str] = None
    login_link: Optional[str] = Field(default=None, alias="loginLink")
    support_link: Optional[str] = Field(default=None, alias="supportLink")


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": message},
    )


def _server_error(message: str, error: Optional[str]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": message, "error": error},
    )


async def _deliver(
    dispatcher: EmailDispatcher,
    endpoint: str,
    to_email: str,
    rendered: RenderedEmail,
    label: str,
    mock_details: Dict[str, Any],
) -> JSONResponse:
    """Send through the active transport, or answer with a mock result when none is configured."""
    if not dispatcher.available:
        logger.info(
            "email_mock_delivery",
            endpoint=endpoint,
            to_email=to_email,
            subject=rendered.subject,
        )
        email_requests.labels(endpoint=endpoint, method="mock", status="sent").inc()
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={
                "success": True,
                "message": f"{label} sent successfully (mock)",
                "method": "mock",
                "details": {"to": to_email, "subject": rendered.subject, **mock_details},
            },
        )

    outcome = await dispatcher.send_email(to_email, rendered)
    email_requests.labels(
        endpoint=endpoint,
        method=outcome.provider or "unknown",
        status=outcome.status.value,
    ).inc()

    if not outcome.success:
        return _server_error(f"Failed to send {label.lower()}", outcome.error)

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "success": True,
            "message": f"{label} sent successfully",
            "messageId": outcome.message_id,
            "method": outcome.provider,
            "data": {
                "email": to_email,
                "sentAt": datetime.now(timezone.utc).isoformat(),
            },
        },
    )


@router.get("/test-email-service")
async def check_email_service(dispatcher: EmailDispatcher = Depends(get_email_dispatcher)):
    """Check connectivity of the active email transport"""
    transport = dispatcher.active_transport
    if transport is None:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=NO_EMAIL_SERVICE)

    try:
        result = await transport.verify()
    except Exception as e:
        logger.error("email_service_test_failed", error=str(e))
        return _server_error("Email service test failed", str(e))

    return JSONResponse(
        status_code=status.HTTP_200_OK if result.success else status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={**result.to_response(), "method": transport.name},
    )


@router.post("/test-email")
async def send_test_email(dispatcher: EmailDispatcher = Depends(get_email_dispatcher)):
    """Send the fixed test message to TEST_EMAIL"""
    if not dispatcher.available:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=NO_EMAIL_SERVICE)

    try:
        outcome = await dispatcher.send_email(settings.TEST_EMAIL, diagnostic_email())
    except Exception as e:
        logger.error("test_email_failed", error=str(e))
        return _server_error("Test email failed", str(e))

    if not outcome.success:
        return _server_error("Test email failed", outcome.error)

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "success": True,
            "message": "Test email sent successfully",
            "method": outcome.provider,
            "data": {"messageId": outcome.message_id, "to": settings.TEST_EMAIL},
        },
    )


@router.post("/password-reset")
async def send_password_reset_email(
    request: Optional[PasswordResetRequest] = None,
    dispatcher: EmailDispatcher = Depends(get_email_dispatcher),
):
    """Send a password reset link"""
    request = request or PasswordResetRequest()
    if not request.email or not request.reset_token:
        return _bad_request("Email and resetToken are required")

    reset_link = settings.frontend_link(f"/auth/reset-password?token={request.reset_token}")

    try:
        return await _deliver(
            dispatcher,
            endpoint="password_reset",
            to_email=request.email,
            rendered=password_reset_email(reset_link),
            label="Password reset email",
            mock_details={"resetLink": reset_link},
        )
    except Exception as e:
        logger.error("password_reset_email_error", error=str(e))
        return _server_error("Failed to send password reset email", str(e))


@router.post("/welcome")
async def send_welcome_email(
    request: Optional[WelcomeRequest] = None,
    dispatcher: EmailDispatcher = Depends(get_email_dispatcher),
):
    """Send the welcome email to a new user"""
    request = request or WelcomeRequest()
    if not request.email or not request.username:
        return _bad_request("Email and username are required")

    login_link = request.login_link or settings.frontend_link("/login")

    try:
        return await _deliver(
            dispatcher,
            endpoint="welcome",
            to_email=request.email,
            rendered=welcome_email(request.username, login_link),
            label="Welcome email",
            mock_details={"username": request.username, "loginLink": login_link},
        )
    except Exception as e:
        logger.error("welcome_email_error", error=str(e))
        return _server_error("Failed to send welcome email", str(e))


@router.post("/security-alert")
async def send_security_alert(
    request: Optional[SecurityAlertRequest] = None,
    dispatcher: EmailDispatcher = Depends(get_email_dispatcher),
):
    """Send a new-login security alert"""
    request = request or SecurityAlertRequest()
    if not request.email or not request.username or not request.login_time:
        return _bad_request("Email, username, and loginTime are required")

    login_link = request.login_link or settings.frontend_link("/dashboard")
    support_link = request.support_link or settings.frontend_link("/support")
    device_info = request.device_info or "Unknown device"
    location = request.location or "Unknown location"

    try:
        return await _deliver(
            dispatcher,
            endpoint="security_alert",
            to_email=request.email,
            rendered=security_alert_email(
                request.username,
                request.login_time,
                device_info,
                location,
                login_link,
                support_link,
            ),
            label="Security alert",
            mock_details={
                "username": request.username,
                "loginTime": request.login_time,
                "deviceInfo": device_info,
                "location": location,
            },
        )
    except Exception as e:
        logger.error("security_alert_error", error=str(e))
        return _server_error("Failed to send security alert", str(e))
