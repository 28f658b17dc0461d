"""Ordered email transport selection."""

from typing import Dict, List, Optional, Sequence

import structlog

from src.interfaces.channel_transport import EmailTransport
from src.schemas.notifications import DeliveryOutcome
from src.templates.email_templates import RenderedEmail

logger = structlog.get_logger()


class EmailDispatcher:
    """
    Routes mail to the first configured transport.

    Transports are tried in the order given (SMTP before SendGrid in
    production wiring). Only one transport is used per send: a failure on
    the active transport is reported, not retried on the next one.
    """

    def __init__(self, transports: Sequence[EmailTransport]):
        self.transports: List[EmailTransport] = list(transports)

    @property
    def active_transport(self) -> Optional[EmailTransport]:
        for transport in self.transports:
            if transport.configured:
                return transport
        return None

    @property
    def available(self) -> bool:
        return self.active_transport is not None

    def status(self) -> Dict[str, str]:
        return {
            transport.name: "configured" if transport.configured else "not configured"
            for transport in self.transports
        }

    async def send_email(self, to_email: str, rendered: RenderedEmail) -> DeliveryOutcome:
        transport = self.active_transport
        if transport is None:
            logger.warning("no_email_service_configured", to_email=to_email)
            return DeliveryOutcome.no_service()

        logger.info("email_transport_selected", provider=transport.name, to_email=to_email)
        return await transport.send(to_email, rendered.subject, rendered.html, rendered.text)
