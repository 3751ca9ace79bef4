"""Permission resolver - overrides first, then role membership, then deny."""

import logging
from datetime import UTC, datetime
from uuid import UUID

from opsauth.application.ports import UnitOfWork
from opsauth.domain.value_objects import AuthorizationSnapshot

logger = logging.getLogger(__name__)


async def load_snapshot(
    uow: UnitOfWork, user_id: UUID, now: datetime | None = None
) -> AuthorizationSnapshot:
    """Read the user's active overrides and role permission set in one unit of work."""
    now = now or datetime.now(UTC)
    overrides = await uow.overrides.active_for_user(user_id, now)
    role_id = await uow.users.get_role_id(user_id)
    role_permission_ids: frozenset[UUID] = frozenset()
    if role_id is not None:
        role_permission_ids = await uow.roles.get_active_permission_ids(role_id)
    return AuthorizationSnapshot(
        user_id=user_id,
        role_id=role_id,
        role_permission_ids=role_permission_ids,
        overrides=overrides,
    )


class OpsAuthPermissionResolver:
    """Resolves allow/deny from a fresh snapshot per evaluation. Holds no state."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def snapshot(self, user_id: UUID) -> AuthorizationSnapshot:
        async with self._uow_factory() as uow:
            snapshot = await load_snapshot(uow, user_id)
        logger.debug(
            "Loaded snapshot for user %s: role=%s, %d role permissions, %d overrides",
            user_id,
            snapshot.role_id,
            len(snapshot.role_permission_ids),
            len(snapshot.overrides),
        )
        return snapshot

    async def is_allowed(self, user_id: UUID, permission_id: UUID) -> bool:
        """Check if user is allowed the permission."""
        snapshot = await self.snapshot(user_id)
        return snapshot.allows(permission_id)
