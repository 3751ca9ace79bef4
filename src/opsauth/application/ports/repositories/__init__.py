"""Repository ports."""

from opsauth.application.ports.repositories.invitation_repository import (
    InvitationRepository,
)
from opsauth.application.ports.repositories.override_repository import (
    OverrideRepository,
)
from opsauth.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from opsauth.application.ports.repositories.role_repository import RoleRepository
from opsauth.application.ports.repositories.user_repository import UserRepository

__all__ = [
    "InvitationRepository",
    "OverrideRepository",
    "PermissionRepository",
    "RoleRepository",
    "UserRepository",
]
