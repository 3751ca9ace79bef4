"""PostgreSQL Unit of Work implementation."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from psycopg_pool import AsyncConnectionPool

from opsauth.infrastructure.persistence.postgres.invitation_repository import (
    PostgresInvitationRepository,
)
from opsauth.infrastructure.persistence.postgres.override_repository import (
    PostgresOverrideRepository,
)
from opsauth.infrastructure.persistence.postgres.permission_repository import (
    PostgresPermissionRepository,
)
from opsauth.infrastructure.persistence.postgres.role_repository import (
    PostgresRoleRepository,
)
from opsauth.infrastructure.persistence.postgres.user_repository import (
    PostgresUserRepository,
)


class PostgresUnitOfWork:
    """PostgreSQL Unit of Work - one connection, one transaction."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool
        self._conn: object | None = None
        self._conn_cm: object | None = None

    async def __aenter__(self) -> "PostgresUnitOfWork":
        self._conn_cm = self._pool.connection()
        self._conn = await self._conn_cm.__aenter__()
        self._permissions = PostgresPermissionRepository(self._conn)
        self._roles = PostgresRoleRepository(self._conn)
        self._overrides = PostgresOverrideRepository(self._conn)
        self._invitations = PostgresInvitationRepository(self._conn)
        self._users = PostgresUserRepository(self._conn)
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        if exc_type and self._conn:
            await self._conn.rollback()
        if self._conn_cm:
            await self._conn_cm.__aexit__(exc_type, exc_val, exc_tb)

    @property
    def permissions(self) -> PostgresPermissionRepository:
        return self._permissions

    @property
    def roles(self) -> PostgresRoleRepository:
        return self._roles

    @property
    def overrides(self) -> PostgresOverrideRepository:
        return self._overrides

    @property
    def invitations(self) -> PostgresInvitationRepository:
        return self._invitations

    @property
    def users(self) -> PostgresUserRepository:
        return self._users

    async def commit(self) -> None:
        if self._conn:
            await self._conn.commit()

    async def rollback(self) -> None:
        if self._conn:
            await self._conn.rollback()


def create_uow_factory(pool: AsyncConnectionPool) -> object:
    """Create UnitOfWork factory (async context manager).

    Commits when the block exits normally, rolls back on any exception.
    """

    @asynccontextmanager
    async def factory() -> AsyncIterator[PostgresUnitOfWork]:
        uow = PostgresUnitOfWork(pool)
        async with uow:
            try:
                yield uow
                await uow.commit()
            except BaseException:
                await uow.rollback()
                raise

    return factory
