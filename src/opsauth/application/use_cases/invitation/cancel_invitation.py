"""Cancel invitation use case."""

import logging
from datetime import UTC, datetime
from uuid import UUID

from opsauth.application.ports import AccessGuard
from opsauth.application.use_cases.tenancy import require_tenant_authority
from opsauth.domain.entities import Invitation
from opsauth.domain.exceptions import InvalidState, NotFound
from opsauth.domain.value_objects import AdminPermission, InvitationStatus, PermissionScope

logger = logging.getLogger(__name__)


async def load_managed_invitation(
    uow_factory, access_guard: AccessGuard, invitation_id: UUID, actor_id: UUID
) -> Invitation:
    """Fetch a PENDING invitation whose role lies in a tenant the actor manages."""
    async with uow_factory() as uow:
        invitation = await uow.invitations.get_by_id(invitation_id)
        if not invitation:
            raise NotFound("Invitation", invitation_id)
        role = await uow.roles.get_by_id(invitation.role_id)
        actor = await uow.users.get_by_id(actor_id)
    scope = role.scope if role else PermissionScope.PLATFORM
    await access_guard.require(actor_id, str(AdminPermission.INVITATION_MANAGE.at(scope)))
    await require_tenant_authority(
        access_guard,
        actor,
        AdminPermission.INVITATION_MANAGE,
        role.organization_id if role else None,
        role.property_id if role else None,
    )
    if invitation.status is not InvitationStatus.PENDING:
        raise InvalidState(f"Invitation {invitation_id} is {invitation.status.value.lower()}")
    return invitation


class CancelInvitationUseCase:
    def __init__(self, unit_of_work_factory: type, access_guard: AccessGuard) -> None:
        self._uow_factory = unit_of_work_factory
        self._access_guard = access_guard

    async def execute(self, invitation_id: UUID, actor_id: UUID) -> None:
        await load_managed_invitation(self._uow_factory, self._access_guard, invitation_id, actor_id)
        async with self._uow_factory() as uow:
            if not await uow.invitations.mark_cancelled(invitation_id, datetime.now(UTC)):
                raise InvalidState(f"Invitation {invitation_id} is no longer pending")
        logger.info("Invitation %s cancelled by %s", invitation_id, actor_id)
