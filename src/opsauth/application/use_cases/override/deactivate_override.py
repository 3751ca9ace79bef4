"""Deactivate user permission override use case."""

import logging
from datetime import UTC, datetime
from uuid import UUID

from opsauth.application.ports import AccessGuard
from opsauth.application.use_cases.tenancy import require_tenant_authority
from opsauth.domain.exceptions import InvalidPermission, NotFound
from opsauth.domain.value_objects import AdminPermission

logger = logging.getLogger(__name__)


class DeactivateOverrideUseCase:
    """Stop an override from applying. The row is kept for audit."""

    def __init__(self, unit_of_work_factory: type, access_guard: AccessGuard) -> None:
        self._uow_factory = unit_of_work_factory
        self._access_guard = access_guard

    async def execute(self, user_id: UUID, permission_id: UUID, revoked_by: UUID) -> None:
        """Deactivate override for user. Actor must manage overrides at the permission's scope."""
        async with self._uow_factory() as uow:
            permission = await uow.permissions.get_by_id(permission_id)
            user = await uow.users.get_by_id(user_id)
            actor = await uow.users.get_by_id(revoked_by)
        if not permission:
            raise InvalidPermission(f"Unknown permission id: {permission_id}")
        if not user:
            raise NotFound("User", user_id)

        await self._access_guard.require(
            revoked_by, str(AdminPermission.OVERRIDE_MANAGE.at(permission.scope))
        )
        await require_tenant_authority(
            self._access_guard,
            actor,
            AdminPermission.OVERRIDE_MANAGE,
            user.organization_id,
            user.property_id,
        )

        async with self._uow_factory() as uow:
            changed = await uow.overrides.deactivate(
                user_id, permission_id, revoked_by, datetime.now(UTC)
            )
            if not changed:
                raise NotFound("UserPermissionOverride", f"{user_id}/{permission_id}")

        logger.info("Deactivated override %s for user %s by %s", permission.key, user_id, revoked_by)
