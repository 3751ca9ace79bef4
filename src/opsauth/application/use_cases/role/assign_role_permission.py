"""Assign permission to role use case."""

import logging
from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID

from opsauth.application.use_cases.role.create_role import validate_role_permissions
from opsauth.domain.entities import Role
from opsauth.domain.exceptions import NotFound

logger = logging.getLogger(__name__)


class AssignRolePermissionUseCase:
    """Add a permission to a role. Assigning a present id is a no-op."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, role_id: UUID, permission_id: UUID) -> Role:
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id)
            if not role:
                raise NotFound("Role", role_id)
            if permission_id in role.permission_ids:
                return role

            await validate_role_permissions(uow, role.scope, [permission_id])
            await uow.roles.add_permission(role_id, permission_id)
            role = replace(
                role,
                permission_ids=role.permission_ids | {permission_id},
                updated_at=datetime.now(UTC),
            )
            await uow.roles.update(role)

        logger.info("Assigned permission %s to role %s", permission_id, role_id)
        return role
