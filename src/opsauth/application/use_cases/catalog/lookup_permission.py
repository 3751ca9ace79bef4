"""Lookup permission use case."""

from opsauth.domain.entities import Permission
from opsauth.domain.exceptions import NotFound
from opsauth.domain.value_objects import PermissionKey


class LookupPermissionUseCase:
    """Find a catalog permission by its triple or textual key."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, resource: str, action: str, scope: str) -> Permission:
        try:
            key = PermissionKey(resource=resource, action=action, scope=scope)
        except ValueError:
            raise NotFound("Permission", f"{resource}.{action}.{scope}") from None
        async with self._uow_factory() as uow:
            permission = await uow.permissions.get_by_key(key.resource, key.action, key.scope)
        if not permission:
            raise NotFound("Permission", str(key))
        return permission

    async def execute_key(self, key: str) -> Permission:
        try:
            parsed = PermissionKey.parse(key)
        except ValueError:
            raise NotFound("Permission", key) from None
        return await self.execute(parsed.resource, parsed.action, parsed.scope)
