"""Resend invitation use case."""

import logging
from datetime import UTC, datetime, timedelta
from uuid import UUID

from opsauth.application.dto.invitation_dto import InvitationIssued, InvitationMessage
from opsauth.application.ports import AccessGuard, InvitationNotifier
from opsauth.application.use_cases.invitation.cancel_invitation import load_managed_invitation
from opsauth.application.use_cases.invitation.create_invitation import accept_url, notify
from opsauth.domain.exceptions import InvalidState
from opsauth.domain.value_objects import InvitationToken

logger = logging.getLogger(__name__)


class ResendInvitationUseCase:
    """Rotate the token of a pending invitation, extend its expiry and notify again.

    The previous token stops working.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        access_guard: AccessGuard,
        notifier: InvitationNotifier | None = None,
        expiry_days: int = 7,
        base_url: str = "",
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._access_guard = access_guard
        self._notifier = notifier
        self._expiry = timedelta(days=expiry_days)
        self._base_url = base_url

    async def execute(self, invitation_id: UUID, actor_id: UUID) -> InvitationIssued:
        await load_managed_invitation(self._uow_factory, self._access_guard, invitation_id, actor_id)

        now = datetime.now(UTC)
        token = InvitationToken.generate()
        async with self._uow_factory() as uow:
            rotated = await uow.invitations.rotate_token(
                invitation_id, token.digest, now + self._expiry, now
            )
            if not rotated:
                raise InvalidState(f"Invitation {invitation_id} is no longer pending")
            invitation = await uow.invitations.get_by_id(invitation_id)
            role = await uow.roles.get_by_id(invitation.role_id)

        logger.info("Invitation %s resent by %s", invitation_id, actor_id)

        url = accept_url(self._base_url, token)
        await notify(
            self._notifier,
            InvitationMessage(
                email=invitation.email,
                role_name=role.name if role else "",
                accept_url=url,
                expires_at=invitation.expires_at,
                message=invitation.message,
                reminder=True,
            ),
        )
        return InvitationIssued(invitation=invitation, token=token.value, accept_url=url)
