"""Domain entities."""

from opsauth.domain.entities.invitation import Invitation
from opsauth.domain.entities.permission import Permission
from opsauth.domain.entities.role import Role
from opsauth.domain.entities.user import User
from opsauth.domain.entities.user_permission_override import UserPermissionOverride

__all__ = [
    "Invitation",
    "Permission",
    "Role",
    "User",
    "UserPermissionOverride",
]
