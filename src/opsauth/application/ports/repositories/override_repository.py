"""User permission override repository port."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from opsauth.domain.entities import UserPermissionOverride


class OverrideRepository(Protocol):
    """Port for per-user override persistence. Unique on (user_id, permission_id)."""

    async def get(self, user_id: UUID, permission_id: UUID) -> UserPermissionOverride | None: ...

    async def upsert(self, override: UserPermissionOverride) -> UserPermissionOverride:
        """Insert or update by (user_id, permission_id); return the stored row."""
        ...

    async def deactivate(
        self,
        user_id: UUID,
        permission_id: UUID,
        revoked_by: UUID | None,
        revoked_at: datetime,
    ) -> bool: ...

    async def deactivate_all(
        self, user_id: UUID, revoked_by: UUID | None, revoked_at: datetime
    ) -> int: ...

    async def list_by_user(self, user_id: UUID) -> list[UserPermissionOverride]: ...

    async def active_for_user(self, user_id: UUID, now: datetime) -> dict[UUID, bool]:
        """permission_id -> granted for rows that are active and unexpired."""
        ...
