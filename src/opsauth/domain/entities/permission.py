"""Permission entity - atomic capability in the catalog."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from opsauth.domain.value_objects import PermissionKey, PermissionScope


@dataclass
class Permission:
    """Permission identified by (resource, action, scope)."""

    id: UUID
    resource: str
    action: str
    scope: PermissionScope
    name: str
    description: str = ""
    is_system: bool = False
    category: str | None = None
    created_at: datetime | None = None

    @property
    def key(self) -> PermissionKey:
        return PermissionKey(self.resource, self.action, self.scope)
