"""Twilio SMS transport"""

import base64
import re
from typing import Any, Dict, Optional

import httpx
import structlog

from src.interfaces.channel_transport import ChannelTransport
from src.schemas.notifications import DeliveryOutcome, VerifyResult

logger = structlog.get_logger()

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"

E164_PATTERN = re.compile(r"^\+[1-9][0-9]{1,14}$")

TEST_SMS_BODY = "🧪 This is a test SMS from NydArt Advisor notification service."


def is_valid_phone_number(phone_number: str) -> bool:
    """E.164: '+' then up to 15 digits, no leading zero."""
    return bool(phone_number) and E164_PATTERN.fullmatch(phone_number) is not None


def format_notification_message(
    title: str,
    message: str,
    data: Optional[Dict[str, Any]] = None,
) -> str:
    data = data or {}
    formatted = f"🔔 {title}\n\n{message}"

    if data.get("actionUrl"):
        formatted += f"\n\n🔗 {data['actionUrl']}"

    if data.get("priority") == "urgent":
        formatted = f"🚨 URGENT: {formatted}"

    return formatted


class TwilioSmsService(ChannelTransport):
    """SMS transport using the Twilio Messages API."""

    name = "twilio"
    channel = "sms"

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        timeout: float = 10.0,
        base_url: str = TWILIO_API_BASE,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.timeout = timeout
        self.base_url = base_url
        super().__init__(bool(account_sid and auth_token and from_number))

        if self.configured:
            logger.info("twilio_initialized", from_number=from_number)
        else:
            logger.warning(
                "twilio_not_configured",
                message="Twilio credentials not set, SMS notifications disabled",
            )

    @classmethod
    def from_settings(cls, settings) -> "TwilioSmsService":
        return cls(
            account_sid=settings.TWILIO_ACCOUNT_SID,
            auth_token=settings.TWILIO_AUTH_TOKEN,
            from_number=settings.TWILIO_PHONE_NUMBER,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )

    def _get_auth_header(self) -> str:
        """Generate Twilio Basic Auth header"""
        credentials = f"{self.account_sid}:{self.auth_token}"
        encoded = base64.b64encode(credentials.encode()).decode()
        return f"Basic {encoded}"

    @property
    def _account_url(self) -> str:
        return f"{self.base_url}/Accounts/{self.account_sid}"

    async def send(self, destination: str, body: str) -> DeliveryOutcome:
        """
        Send an SMS via Twilio.

        The number is checked against E.164 before any provider call.
        """
        if not self.configured:
            return DeliveryOutcome.failed("Twilio service not initialized", provider=self.name)

        if not is_valid_phone_number(destination):
            logger.warning("twilio_invalid_number", to=destination)
            return DeliveryOutcome.failed(
                f"Invalid phone number format: {destination}",
                provider=self.name,
            )

        data = {
            "From": self.from_number,
            "To": destination,
            "Body": body,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self._account_url}/Messages.json",
                    data=data,
                    headers={"Authorization": self._get_auth_header()},
                )
        except Exception as e:
            logger.error("twilio_sms_error", error=str(e), to=destination)
            return DeliveryOutcome.failed(str(e), provider=self.name)

        if response.status_code == 201:
            result = response.json()
            logger.info(
                "twilio_sms_sent",
                to=destination,
                sid=result.get("sid"),
                status=result.get("status"),
            )
            return DeliveryOutcome.sent(provider=self.name, message_id=result.get("sid"))

        error = f"Twilio API returned {response.status_code}: {response.text}"
        logger.error("twilio_sms_failed", status_code=response.status_code, to=destination)
        return DeliveryOutcome.failed(error, provider=self.name)

    async def send_notification_sms(
        self,
        phone_number: str,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> DeliveryOutcome:
        return await self.send(phone_number, format_notification_message(title, message, data))

    async def send_test_sms(self, phone_number: str) -> DeliveryOutcome:
        return await self.send(phone_number, TEST_SMS_BODY)

    async def get_account_info(self) -> Optional[Dict[str, Any]]:
        """Fetch account details, or None if unavailable."""
        if not self.configured:
            return None

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    f"{self._account_url}.json",
                    headers={"Authorization": self._get_auth_header()},
                )
                response.raise_for_status()
                account = response.json()
        except Exception as e:
            logger.error("twilio_account_info_failed", error=str(e))
            return None

        return {
            "accountSid": account.get("sid"),
            "accountName": account.get("friendly_name"),
            "status": account.get("status"),
        }

    async def verify(self) -> VerifyResult:
        if not self.configured:
            return VerifyResult(
                success=False,
                message="Twilio SMS service not initialized",
                error="TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN or TWILIO_PHONE_NUMBER not found",
            )

        account = await self.get_account_info()
        if account is None:
            return VerifyResult(
                success=False,
                message="Twilio connection test failed",
                error="Could not fetch Twilio account information",
            )

        return VerifyResult(
            success=True,
            message="Twilio connection test successful",
            details=account,
        )
