"""User repository port - the slice of the external user store the core needs."""

from typing import Protocol
from uuid import UUID

from opsauth.domain.entities import User


class UserRepository(Protocol):
    """Port for user persistence."""

    async def get_by_id(self, user_id: UUID) -> User | None: ...

    async def get_by_email(self, email: str) -> User | None: ...

    async def get_role_id(self, user_id: UUID) -> UUID | None: ...

    async def create(self, user: User) -> User: ...

    async def update(self, user: User) -> None: ...

    async def count_by_role(self, role_id: UUID) -> int:
        """Users holding the role, active or not."""
        ...
