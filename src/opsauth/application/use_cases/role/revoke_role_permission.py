"""Revoke permission from role use case."""

import logging
from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID

from opsauth.domain.entities import Role
from opsauth.domain.exceptions import NotFound

logger = logging.getLogger(__name__)


class RevokeRolePermissionUseCase:
    """Remove a permission from a role. Revoking an absent id is a no-op."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, role_id: UUID, permission_id: UUID) -> Role:
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id)
            if not role:
                raise NotFound("Role", role_id)
            if permission_id not in role.permission_ids:
                return role

            await uow.roles.remove_permission(role_id, permission_id)
            role = replace(
                role,
                permission_ids=role.permission_ids - {permission_id},
                updated_at=datetime.now(UTC),
            )
            await uow.roles.update(role)

        logger.info("Revoked permission %s from role %s", permission_id, role_id)
        return role
