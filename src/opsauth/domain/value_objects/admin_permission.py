"""Permissions the authorization core itself requires for administrative actions."""

from enum import StrEnum

from opsauth.domain.value_objects.permission_key import PermissionKey
from opsauth.domain.value_objects.permission_scope import PermissionScope


class AdminPermission(StrEnum):
    """Resource/action pairs; the scope is supplied per check."""

    PERMISSION_MANAGE = "permission.manage"
    ROLE_MANAGE = "role.manage"
    ROLE_ASSIGN = "role.assign"
    OVERRIDE_MANAGE = "user_permission.manage"
    INVITATION_MANAGE = "invitation.manage"

    def at(self, scope: PermissionScope) -> PermissionKey:
        resource, action = self.value.split(".")
        return PermissionKey(resource=resource, action=action, scope=scope)
