"""Deactivate role use case."""

import logging
from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID

from opsauth.domain.entities import Role
from opsauth.domain.exceptions import NotFound

logger = logging.getLogger(__name__)


class DeactivateRoleUseCase:
    """Soft-deactivate a role; its holders resolve to an empty permission set."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, role_id: UUID) -> Role:
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id)
            if not role:
                raise NotFound("Role", role_id)
            if not role.is_active:
                return role
            role = replace(role, is_active=False, updated_at=datetime.now(UTC))
            await uow.roles.update(role)

        logger.info("Deactivated role %s (%s)", role.name, role_id)
        return role
