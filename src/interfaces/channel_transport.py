"""Channel transport interface"""

from abc import ABC, abstractmethod

from src.schemas.notifications import DeliveryOutcome, VerifyResult


class ChannelTransport(ABC):
    """Interface for delivery transports (SMTP, SendGrid, Twilio, ...).

    ``configured`` is resolved once from the credentials passed to the
    constructor and never changes afterwards.
    """

    name: str = ""
    channel: str = ""

    def __init__(self, configured: bool):
        self._configured = configured

    @property
    def configured(self) -> bool:
        return self._configured

    @abstractmethod
    async def send(self, destination: str, *args, **kwargs) -> DeliveryOutcome:
        """Deliver a message; provider errors come back as a failed outcome"""
        pass

    @abstractmethod
    async def verify(self) -> VerifyResult:
        """Best-effort connectivity check against the provider"""
        pass


class EmailTransport(ChannelTransport):
    channel = "email"

    @abstractmethod
    async def send(
        self,
        destination: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> DeliveryOutcome:
        pass
