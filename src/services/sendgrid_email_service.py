"""SendGrid email transport using the v3 Web API."""

import httpx
import structlog

from src.interfaces.channel_transport import EmailTransport
from src.schemas.notifications import DeliveryOutcome, VerifyResult

logger = structlog.get_logger()

SENDGRID_API_BASE = "https://api.sendgrid.com/v3"


class SendGridEmailService(EmailTransport):
    """Email transport using SendGrid's HTTP API."""

    name = "sendgrid"

    def __init__(
        self,
        api_key: str,
        from_email: str,
        from_name: str = "NydArt Advisor",
        timeout: float = 10.0,
        base_url: str = SENDGRID_API_BASE,
    ):
        self.api_key = api_key
        self.from_email = from_email
        self.from_name = from_name
        self.timeout = timeout
        self.base_url = base_url
        super().__init__(bool(api_key))

        if self.configured:
            logger.info("sendgrid_initialized")
        else:
            logger.warning(
                "sendgrid_not_configured",
                message="SENDGRID_API_KEY not set, SendGrid sending disabled",
            )

    @classmethod
    def from_settings(cls, settings) -> "SendGridEmailService":
        return cls(
            api_key=settings.SENDGRID_API_KEY,
            from_email=settings.SENDGRID_FROM_EMAIL,
            from_name=settings.SENDGRID_FROM_NAME,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def send(
        self,
        destination: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> DeliveryOutcome:
        """
        Send an email via the SendGrid mail/send endpoint.

        Args:
            destination: Recipient email address
            subject: Email subject
            html_body: HTML body
            text_body: Plain text body

        Returns:
            Sent outcome with SendGrid's X-Message-Id, or a failed outcome
        """
        if not self.configured:
            return DeliveryOutcome.failed("SendGrid service not configured", provider=self.name)

        content = [{"type": "text/plain", "value": text_body}]
        if html_body:
            content.append({"type": "text/html", "value": html_body})

        payload = {
            "personalizations": [{"to": [{"email": destination}]}],
            "from": {"email": self.from_email, "name": self.from_name},
            "subject": subject,
            "content": content,
        }

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{self.base_url}/mail/send",
                    headers=self._headers(),
                    json=payload,
                    timeout=self.timeout,
                )

                if response.is_success:
                    message_id = response.headers.get("x-message-id")
                    logger.info(
                        "sendgrid_email_sent",
                        to_email=destination,
                        subject=subject,
                        message_id=message_id,
                    )
                    return DeliveryOutcome.sent(provider=self.name, message_id=message_id)

                error = self._error_message(response)
                logger.error(
                    "sendgrid_email_failed",
                    status_code=response.status_code,
                    error=error,
                    to_email=destination,
                )
                return DeliveryOutcome.failed(error, provider=self.name)

        except httpx.TimeoutException:
            logger.error(
                "sendgrid_timeout",
                to_email=destination,
                message="Request to SendGrid timed out",
            )
            return DeliveryOutcome.failed("Request to SendGrid timed out", provider=self.name)
        except Exception as e:
            logger.error("sendgrid_error", error=str(e), to_email=destination)
            return DeliveryOutcome.failed(str(e), provider=self.name)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            errors = response.json().get("errors") or []
        except ValueError:
            errors = []
        if errors and errors[0].get("message"):
            return errors[0]["message"]
        return f"SendGrid API error ({response.status_code})"

    async def verify(self) -> VerifyResult:
        """Probe the API key against the user profile endpoint (no mail is sent)."""
        if not self.configured:
            return VerifyResult(
                success=False,
                message="SendGrid not initialized",
                error="SENDGRID_API_KEY not found",
            )

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    f"{self.base_url}/user/profile",
                    headers=self._headers(),
                    timeout=self.timeout,
                )
        except Exception as e:
            logger.error("sendgrid_verify_failed", error=str(e))
            return VerifyResult(
                success=False,
                message="SendGrid connection test failed",
                error=str(e),
            )

        if response.status_code == 200:
            return VerifyResult(success=True, message="SendGrid connection test successful")

        return VerifyResult(
            success=False,
            message="SendGrid connection test failed",
            error=self._error_message(response),
        )
