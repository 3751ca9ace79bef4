"""Permission resolver port - allow/deny decision engine."""

from typing import Protocol
from uuid import UUID

from opsauth.domain.value_objects import AuthorizationSnapshot


class PermissionResolver(Protocol):
    """Port for resolving a user's permissions."""

    async def snapshot(self, user_id: UUID) -> AuthorizationSnapshot: ...

    async def is_allowed(self, user_id: UUID, permission_id: UUID) -> bool: ...
