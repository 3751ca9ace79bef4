"""Per-user explicit grant or deny of one permission."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class UserPermissionOverride:
    """Override row, unique per (user_id, permission_id)."""

    id: UUID
    user_id: UUID
    permission_id: UUID
    granted: bool
    granted_by: UUID
    granted_at: datetime
    is_active: bool = True
    expires_at: datetime | None = None
    revoked_by: UUID | None = None
    revoked_at: datetime | None = None

    def applies_at(self, now: datetime) -> bool:
        """Active and not past its expiry."""
        if not self.is_active:
            return False
        return self.expires_at is None or self.expires_at > now
