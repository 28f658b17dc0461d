"""Multi-channel notification and SMS diagnostic routes"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from src.api.dependencies import get_notification_service, get_sms_service
from src.schemas.notifications import NotificationRequest
from src.services.notification_service import NotificationService
from src.services.twilio_sms_service import TwilioSmsService

logger = structlog.get_logger()
router = APIRouter()


class SmsTestRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")


@router.post("/notifications")
async def send_notification(
    request: NotificationRequest,
    service: NotificationService = Depends(get_notification_service),
):
    """Send a notification on every channel the user has opted into"""
    try:
        result = await service.send_notification(
            user_id=request.user_id,
            category=request.category,
            title=request.title,
            message=request.message,
            data=request.data,
        )
    except Exception as e:
        logger.error("send_notification_error", user_id=request.user_id, error=str(e))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": "Failed to send notification", "error": str(e)},
        )

    return JSONResponse(
        status_code=status.HTTP_200_OK if result.success else status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=result.to_response(),
    )


@router.get("/test-sms-service")
async def check_sms_service(sms_service: TwilioSmsService = Depends(get_sms_service)):
    """Check Twilio credentials against the account endpoint"""
    result = await sms_service.verify()
    return JSONResponse(
        status_code=status.HTTP_200_OK if result.success else status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=result.to_response(),
    )


@router.post("/test-sms")
async def send_test_sms(
    request: Optional[SmsTestRequest] = None,
    sms_service: TwilioSmsService = Depends(get_sms_service),
):
    """Send the fixed test SMS"""
    request = request or SmsTestRequest()
    if not request.phone_number:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": "phoneNumber is required"},
        )

    outcome = await sms_service.send_test_sms(request.phone_number)
    content = outcome.to_response()
    content["message"] = "Test SMS sent successfully" if outcome.success else "Test SMS failed"
    return JSONResponse(
        status_code=status.HTTP_200_OK if outcome.success else status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
    )
