"""Textual permission key - resource.action.scope."""

import re
from dataclasses import dataclass

from opsauth.domain.value_objects.permission_scope import PermissionScope

_TOKEN = re.compile(r"^[a-z][a-z0-9_]*$")


@dataclass(frozen=True)
class PermissionKey:
    """Stable wire identity of a permission: ``"<resource>.<action>.<scope>"``."""

    resource: str
    action: str
    scope: PermissionScope

    def __post_init__(self) -> None:
        for token in (self.resource, self.action):
            if not _TOKEN.match(token):
                raise ValueError(f"Invalid permission token: {token!r}")
        if not isinstance(self.scope, PermissionScope):
            object.__setattr__(self, "scope", PermissionScope(self.scope))

    @classmethod
    def parse(cls, key: str) -> "PermissionKey":
        """Parse ``resource.action.scope``; raises ValueError when malformed."""
        parts = key.split(".")
        if len(parts) != 3:
            raise ValueError(
                f"Invalid permission key {key!r}: expected resource.action.scope"
            )
        resource, action, scope = parts
        try:
            parsed_scope = PermissionScope(scope)
        except ValueError:
            raise ValueError(f"Invalid permission scope in {key!r}: {scope!r}") from None
        return cls(resource=resource, action=action, scope=parsed_scope)

    def __str__(self) -> str:
        return f"{self.resource}.{self.action}.{self.scope.value}"
