"""Domain value objects."""

from opsauth.domain.value_objects.admin_permission import AdminPermission
from opsauth.domain.value_objects.authorization_snapshot import AuthorizationSnapshot
from opsauth.domain.value_objects.denial_reason import DenialReason
from opsauth.domain.value_objects.invitation_status import InvitationStatus
from opsauth.domain.value_objects.invitation_token import InvitationToken
from opsauth.domain.value_objects.permission_key import PermissionKey
from opsauth.domain.value_objects.permission_scope import PermissionScope
from opsauth.domain.value_objects.user_type import UserType

__all__ = [
    "AdminPermission",
    "AuthorizationSnapshot",
    "DenialReason",
    "InvitationStatus",
    "InvitationToken",
    "PermissionKey",
    "PermissionScope",
    "UserType",
]
