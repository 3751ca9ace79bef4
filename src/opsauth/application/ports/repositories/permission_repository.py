"""Permission catalog repository port."""

from typing import Protocol
from uuid import UUID

from opsauth.domain.entities import Permission
from opsauth.domain.value_objects import PermissionScope


class PermissionRepository(Protocol):
    """Port for permission catalog persistence."""

    async def get_by_id(self, permission_id: UUID) -> Permission | None: ...

    async def get_by_key(
        self, resource: str, action: str, scope: PermissionScope
    ) -> Permission | None: ...

    async def get_many(self, permission_ids: list[UUID]) -> list[Permission]: ...

    async def list_all(
        self,
        *,
        resource: str | None = None,
        scope: PermissionScope | None = None,
    ) -> list[Permission]: ...

    async def insert_if_absent(self, permission: Permission) -> Permission:
        """Insert unless the (resource, action, scope) triple exists; return the stored row."""
        ...

    async def update(self, permission: Permission) -> None: ...

    async def delete(self, permission_id: UUID) -> None: ...

    async def count_references(self, permission_id: UUID) -> int:
        """Number of role and override rows referencing the permission."""
        ...
