"""Set user permission override use case."""

import logging
from datetime import UTC, datetime
from uuid import UUID, uuid4

from opsauth.application.ports import AccessGuard, PermissionResolver
from opsauth.application.use_cases.tenancy import require_tenant_authority
from opsauth.domain.entities import UserPermissionOverride
from opsauth.domain.exceptions import Forbidden, InvalidPermission, NotFound, ValidationError
from opsauth.domain.value_objects import AdminPermission

logger = logging.getLogger(__name__)


class SetOverrideUseCase:
    """Grant or deny one permission to one user, independent of their role."""

    def __init__(
        self,
        unit_of_work_factory: type,
        access_guard: AccessGuard,
        permission_resolver: PermissionResolver,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._access_guard = access_guard
        self._resolver = permission_resolver

    async def execute(
        self,
        user_id: UUID,
        permission_id: UUID,
        granted: bool,
        granted_by: UUID,
        expires_at: datetime | None = None,
    ) -> UserPermissionOverride:
        """Upsert by (user_id, permission_id).

        The actor must manage overrides at the permission's scope and administer
        the target user's tenant.
        """
        now = datetime.now(UTC)
        if expires_at is not None and expires_at <= now:
            raise ValidationError("expires_at must be in the future")

        async with self._uow_factory() as uow:
            permission = await uow.permissions.get_by_id(permission_id)
            user = await uow.users.get_by_id(user_id)
            actor = await uow.users.get_by_id(granted_by)
        if not permission:
            raise InvalidPermission(f"Unknown permission id: {permission_id}")
        if not user:
            raise NotFound("User", user_id)

        await self._access_guard.require(
            granted_by, str(AdminPermission.OVERRIDE_MANAGE.at(permission.scope))
        )
        await require_tenant_authority(
            self._access_guard,
            actor,
            AdminPermission.OVERRIDE_MANAGE,
            user.organization_id,
            user.property_id,
        )
        if granted and not await self._resolver.is_allowed(granted_by, permission_id):
            raise Forbidden(f"Cannot grant {permission.key} without holding it")

        async with self._uow_factory() as uow:
            existing = await uow.overrides.get(user_id, permission_id)
            override = UserPermissionOverride(
                id=existing.id if existing else uuid4(),
                user_id=user_id,
                permission_id=permission_id,
                granted=granted,
                granted_by=granted_by,
                granted_at=now,
                is_active=True,
                expires_at=expires_at,
            )
            stored = await uow.overrides.upsert(override)

        logger.info(
            "Override %s %s for user %s by %s",
            "granting" if granted else "denying",
            permission.key,
            user_id,
            granted_by,
        )
        return stored
