"""Delete role use case."""

import logging
from uuid import UUID

from opsauth.domain.exceptions import Forbidden, InUse, NotFound

logger = logging.getLogger(__name__)


class DeleteRoleUseCase:
    """Delete a role no user or invitation references.

    Referenced roles must be deactivated instead.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, role_id: UUID) -> None:
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id)
            if not role:
                raise NotFound("Role", role_id)
            if role.is_system:
                raise Forbidden("System roles cannot be deleted")

            holders = await uow.users.count_by_role(role_id)
            invitations = await uow.invitations.count_by_role(role_id)
            if holders or invitations:
                raise InUse(
                    f"Role {role.name} is referenced by {holders} users "
                    f"and {invitations} invitations"
                )
            await uow.roles.delete(role_id)

        logger.info("Deleted role %s (%s)", role.name, role_id)
