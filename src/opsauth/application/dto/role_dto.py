"""Role and override DTOs."""

from dataclasses import dataclass, field
from uuid import UUID

from opsauth.domain.entities import Permission, Role, UserPermissionOverride
from opsauth.domain.value_objects import UserType


@dataclass
class RoleCreateInput:
    """Input for creating a role."""

    name: str
    description: str = ""
    priority: int = 100
    permission_ids: list[UUID] = field(default_factory=list)
    organization_id: UUID | None = None
    property_id: UUID | None = None
    user_type: UserType = UserType.INTERNAL
    allowed_modules: list[str] = field(default_factory=list)


@dataclass
class PermissionSummary:
    """Where a user's effective permissions come from."""

    user_id: UUID
    role: Role | None
    role_permissions: list[Permission]
    granted: list[Permission]
    denied: list[Permission]
    effective: list[Permission]
    overrides: list[UserPermissionOverride] = field(default_factory=list)
