"""Access guard port - request-time enforcement point."""

from typing import Protocol
from uuid import UUID

from opsauth.application.dto.access_decision import AccessDecision


class AccessGuard(Protocol):
    """Port for checking declared permission keys for a caller."""

    async def check(self, user_id: UUID, *permission_keys: str) -> AccessDecision: ...

    async def require(self, user_id: UUID, *permission_keys: str) -> None: ...

    async def unknown_keys(self, permission_keys: list[str]) -> list[str]: ...
