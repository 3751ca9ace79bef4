"""Role entity for RBAC."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from opsauth.domain.value_objects import PermissionScope, UserType


@dataclass
class Role:
    """Named bundle of permissions, optionally scoped to an organization or property."""

    id: UUID
    name: str
    description: str = ""
    priority: int = 100
    permission_ids: frozenset[UUID] = field(default_factory=frozenset)
    organization_id: UUID | None = None
    property_id: UUID | None = None
    user_type: UserType = UserType.INTERNAL
    allowed_modules: tuple[str, ...] = ()
    is_active: bool = True
    is_system: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def scope(self) -> PermissionScope:
        if self.property_id is not None:
            return PermissionScope.PROPERTY
        if self.organization_id is not None:
            return PermissionScope.ORGANIZATION
        return PermissionScope.PLATFORM
