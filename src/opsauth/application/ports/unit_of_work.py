"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from opsauth.application.ports.repositories.invitation_repository import (
    InvitationRepository,
)
from opsauth.application.ports.repositories.override_repository import (
    OverrideRepository,
)
from opsauth.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from opsauth.application.ports.repositories.role_repository import RoleRepository
from opsauth.application.ports.repositories.user_repository import UserRepository


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def permissions(self) -> PermissionRepository: ...

    @property
    def roles(self) -> RoleRepository: ...

    @property
    def overrides(self) -> OverrideRepository: ...

    @property
    def invitations(self) -> InvitationRepository: ...

    @property
    def users(self) -> UserRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances."""

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
