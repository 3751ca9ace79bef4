"""Role repository port."""

from typing import Protocol
from uuid import UUID

from opsauth.domain.entities import Role


class RoleRepository(Protocol):
    """Port for role persistence."""

    async def get_by_id(self, role_id: UUID) -> Role | None: ...

    async def get_by_name(
        self,
        name: str,
        organization_id: UUID | None = None,
        property_id: UUID | None = None,
    ) -> Role | None: ...

    async def list_all(self, *, include_inactive: bool = False) -> list[Role]: ...

    async def create(self, role: Role) -> Role: ...

    async def update(self, role: Role) -> None:
        """Persist descriptive fields and is_active; the permission set is untouched."""
        ...

    async def delete(self, role_id: UUID) -> None: ...

    async def add_permission(self, role_id: UUID, permission_id: UUID) -> None: ...

    async def remove_permission(self, role_id: UUID, permission_id: UUID) -> None: ...

    async def get_active_permission_ids(self, role_id: UUID) -> frozenset[UUID]:
        """Permission set of an active role; empty for inactive or unknown roles."""
        ...
