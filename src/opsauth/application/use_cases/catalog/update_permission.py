"""Update permission description use case."""

from uuid import UUID

from opsauth.domain.entities import Permission
from opsauth.domain.exceptions import Forbidden, NotFound


class UpdatePermissionUseCase:
    """Edit descriptive fields only; the triple is immutable."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        permission_id: UUID,
        name: str | None = None,
        description: str | None = None,
        category: str | None = None,
    ) -> Permission:
        async with self._uow_factory() as uow:
            permission = await uow.permissions.get_by_id(permission_id)
            if not permission:
                raise NotFound("Permission", permission_id)
            if permission.is_system:
                raise Forbidden("System permissions cannot be edited")

            if name is not None:
                permission.name = name
            if description is not None:
                permission.description = description
            if category is not None:
                permission.category = category
            await uow.permissions.update(permission)
        return permission
