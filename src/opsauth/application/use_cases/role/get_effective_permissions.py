"""Get effective permissions of a role."""

from uuid import UUID

from opsauth.domain.exceptions import NotFound


class GetEffectivePermissionsUseCase:
    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, role_id: UUID) -> frozenset[UUID]:
        """Permission ids of an active role; NotFound for unknown or inactive roles."""
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id)
            if not role or not role.is_active:
                raise NotFound("Role", role_id)
            return await uow.roles.get_active_permission_ids(role_id)
