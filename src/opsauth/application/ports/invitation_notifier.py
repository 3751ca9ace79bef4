"""Invitation notifier port - delivery is an external concern."""

from typing import Protocol

from opsauth.application.dto.invitation_dto import InvitationMessage


class InvitationNotifier(Protocol):
    """Port for handing an invitation message to a delivery channel."""

    async def send(self, message: InvitationMessage) -> None: ...
