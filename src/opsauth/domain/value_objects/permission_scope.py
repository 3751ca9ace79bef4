"""Tenant scope of permissions and roles."""

from enum import StrEnum


class PermissionScope(StrEnum):
    """Tenant breadth a permission or role applies at."""

    PLATFORM = "platform"
    ORGANIZATION = "organization"
    PROPERTY = "property"

    @property
    def breadth(self) -> int:
        return _BREADTH[self]

    def covers(self, other: "PermissionScope") -> bool:
        """True when a role at this scope may carry a permission at ``other``."""
        return other.breadth <= self.breadth


_BREADTH = {
    PermissionScope.PROPERTY: 0,
    PermissionScope.ORGANIZATION: 1,
    PermissionScope.PLATFORM: 2,
}
