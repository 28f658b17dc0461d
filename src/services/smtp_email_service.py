"""SMTP email transport (Gmail, Outlook, Yahoo or a custom server)"""

import asyncio
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from typing import Dict, Optional, Tuple

import structlog

from src.interfaces.channel_transport import EmailTransport
from src.schemas.notifications import DeliveryOutcome, VerifyResult

logger = structlog.get_logger()

# provider -> (host, port, implicit TLS)
WELL_KNOWN_PROVIDERS: Dict[str, Tuple[str, int, bool]] = {
    "gmail": ("smtp.gmail.com", 465, True),
    "outlook": ("smtp-mail.outlook.com", 587, False),
    "hotmail": ("smtp-mail.outlook.com", 587, False),
    "yahoo": ("smtp.mail.yahoo.com", 465, True),
}


@dataclass(frozen=True)
class SmtpConfig:
    provider: str = "gmail"
    user: str = ""
    password: str = ""
    host: str = ""
    port: int = 587
    secure: bool = False
    from_email: str = ""
    from_name: str = "NydArt Advisor"
    timeout: float = 30.0

    def resolve_server(self) -> Optional[Tuple[str, int, bool]]:
        """Return (host, port, implicit TLS) or None if the provider is unusable."""
        provider = self.provider.lower()
        if provider == "custom":
            if not self.host:
                return None
            return self.host, self.port, self.secure
        return WELL_KNOWN_PROVIDERS.get(provider)


class SmtpEmailService(EmailTransport):
    """Email transport speaking SMTP with username/password auth."""

    name = "smtp"

    def __init__(self, config: SmtpConfig):
        self.config = config
        self.server = config.resolve_server()
        self.from_email = config.from_email or config.user
        configured = bool(config.user and config.password and self.server)
        super().__init__(configured)

        if configured:
            logger.info("smtp_initialized", provider=config.provider, host=self.server[0])
        elif config.user and config.password:
            logger.error(
                "smtp_provider_unusable",
                provider=config.provider,
                message="Unsupported EMAIL_PROVIDER or EMAIL_HOST missing for custom provider",
            )
        else:
            logger.warning(
                "smtp_not_configured",
                message="EMAIL_USER or EMAIL_PASSWORD not set, SMTP sending disabled",
            )

    @classmethod
    def from_settings(cls, settings) -> "SmtpEmailService":
        return cls(
            SmtpConfig(
                provider=settings.EMAIL_PROVIDER,
                user=settings.EMAIL_USER,
                password=settings.EMAIL_PASSWORD,
                host=settings.EMAIL_HOST,
                port=settings.EMAIL_PORT,
                secure=settings.EMAIL_SECURE,
                from_email=settings.email_from_address,
                from_name=settings.EMAIL_FROM_NAME,
                timeout=settings.SMTP_TIMEOUT_SECONDS,
            )
        )

    def _connect(self) -> smtplib.SMTP:
        host, port, implicit_tls = self.server
        if implicit_tls:
            server = smtplib.SMTP_SSL(host, port, timeout=self.config.timeout)
        else:
            server = smtplib.SMTP(host, port, timeout=self.config.timeout)
        try:
            if not implicit_tls:
                server.starttls()
            server.login(self.config.user, self.config.password)
        except (smtplib.SMTPException, OSError):
            server.close()
            raise
        return server

    def _build_message(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = formataddr((self.config.from_name, self.from_email))
        msg["To"] = to_email
        domain = self.from_email.split("@")[-1] if "@" in self.from_email else None
        msg["Message-ID"] = make_msgid(domain=domain)

        msg.attach(MIMEText(text_body, "plain", "utf-8"))
        if html_body:
            msg.attach(MIMEText(html_body, "html", "utf-8"))
        return msg

    def _deliver(self, to_email: str, msg: MIMEMultipart) -> None:
        with self._connect() as server:
            server.sendmail(self.from_email, [to_email], msg.as_string())

    async def send(
        self,
        destination: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> DeliveryOutcome:
        """
        Send an email over SMTP.

        Args:
            destination: Recipient email address
            subject: Email subject
            html_body: HTML body
            text_body: Plain text body

        Returns:
            Sent outcome carrying the Message-ID, or a failed outcome
        """
        if not self.configured:
            return DeliveryOutcome.failed("SMTP service not configured", provider=self.name)

        msg = self._build_message(destination, subject, html_body, text_body)

        try:
            await asyncio.to_thread(self._deliver, destination, msg)
        except smtplib.SMTPAuthenticationError as e:
            logger.error("smtp_auth_error", error=str(e), smtp_host=self.server[0])
            return DeliveryOutcome.failed(f"SMTP authentication failed: {e}", provider=self.name)
        except Exception as e:
            logger.error("smtp_email_failed", error=str(e), to_email=destination)
            return DeliveryOutcome.failed(str(e), provider=self.name)

        message_id = msg["Message-ID"]
        logger.info(
            "smtp_email_sent",
            to_email=destination,
            subject=subject,
            smtp_host=self.server[0],
            message_id=message_id,
        )
        return DeliveryOutcome.sent(provider=self.name, message_id=message_id)

    def _check_connection(self) -> None:
        with self._connect() as server:
            code, _ = server.noop()
            if code != 250:
                raise smtplib.SMTPResponseException(code, b"NOOP rejected")

    async def verify(self) -> VerifyResult:
        if not self.configured:
            return VerifyResult(
                success=False,
                message="SMTP service not initialized",
                error="EMAIL_USER or EMAIL_PASSWORD not found",
            )

        try:
            await asyncio.to_thread(self._check_connection)
        except Exception as e:
            logger.error("smtp_verify_failed", error=str(e), smtp_host=self.server[0])
            return VerifyResult(
                success=False,
                message="SMTP connection test failed",
                error=str(e),
            )

        return VerifyResult(
            success=True,
            message="SMTP connection test successful",
            details={"host": self.server[0], "port": self.server[1]},
        )
