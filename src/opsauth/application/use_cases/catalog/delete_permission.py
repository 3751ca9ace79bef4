"""Delete permission use case."""

import logging
from uuid import UUID

from opsauth.domain.exceptions import Forbidden, InUse, NotFound

logger = logging.getLogger(__name__)


class DeletePermissionUseCase:
    """Remove an unreferenced, non-system permission from the catalog."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, permission_id: UUID) -> None:
        async with self._uow_factory() as uow:
            permission = await uow.permissions.get_by_id(permission_id)
            if not permission:
                raise NotFound("Permission", permission_id)
            if permission.is_system:
                raise Forbidden("System permissions cannot be deleted")

            references = await uow.permissions.count_references(permission_id)
            if references:
                raise InUse(
                    f"Permission {permission.key} is referenced by {references} role or override rows"
                )
            await uow.permissions.delete(permission_id)

        logger.info("Deleted permission %s (%s)", permission.key, permission_id)
