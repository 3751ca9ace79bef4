"""Per-evaluation snapshot of a user's role permissions and active overrides."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True)
class AuthorizationSnapshot:
    """Everything the resolver needs for one user, loaded once per evaluation."""

    user_id: UUID
    role_id: UUID | None
    role_permission_ids: frozenset[UUID] = field(default_factory=frozenset)
    overrides: Mapping[UUID, bool] = field(default_factory=dict)

    def allows(self, permission_id: UUID) -> bool:
        # Precedence: explicit override, then role membership, then deny.
        granted = self.overrides.get(permission_id)
        if granted is not None:
            return granted
        return permission_id in self.role_permission_ids
