"""Invitation delivery through an HTTP mail-service webhook."""

import logging

import httpx

from opsauth.application.dto.invitation_dto import InvitationMessage
from opsauth.domain.exceptions import DeliveryFailed

logger = logging.getLogger(__name__)


class HttpInvitationNotifier:
    """POSTs invitation messages as JSON to a webhook URL."""

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._webhook_url = webhook_url
        self._timeout = timeout
        self._transport = transport

    async def send(self, message: InvitationMessage) -> None:
        payload = {
            "template": "invitation_reminder" if message.reminder else "invitation",
            "to": message.email,
            "role": message.role_name,
            "accept_url": message.accept_url,
            "expires_at": message.expires_at.isoformat(),
            "message": message.message,
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self._webhook_url, json=payload)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise DeliveryFailed(f"Webhook {self._webhook_url} rejected invitation: {e}") from e
        logger.debug("Invitation for %s delivered to webhook", message.email)
