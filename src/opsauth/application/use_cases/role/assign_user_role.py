"""Assign role to user use case."""

import logging
from dataclasses import replace
from uuid import UUID

from opsauth.application.ports import AccessGuard, PermissionResolver
from opsauth.application.use_cases.tenancy import require_tenant_authority
from opsauth.domain.entities import User
from opsauth.domain.exceptions import Forbidden, InvalidState, NotFound
from opsauth.domain.value_objects import AdminPermission

logger = logging.getLogger(__name__)


class AssignUserRoleUseCase:
    """Move an existing user onto another role. A user holds one role at a time."""

    def __init__(
        self,
        unit_of_work_factory: type,
        access_guard: AccessGuard,
        permission_resolver: PermissionResolver,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._access_guard = access_guard
        self._resolver = permission_resolver

    async def execute(self, user_id: UUID, role_id: UUID, assigned_by: UUID) -> User:
        """Replace the user's role.

        The actor needs role.assign at the role's scope, must administer both the
        user's current tenant and the role's tenant, and must itself be allowed
        every permission the role carries. Reassigning the current role is a no-op.

        Raises:
            NotFound: User does not exist, or role does not exist or is inactive.
            InvalidState: User is inactive.
            Forbidden: Actor lacks authority.
        """
        async with self._uow_factory() as uow:
            user = await uow.users.get_by_id(user_id)
            if not user:
                raise NotFound("User", user_id)
            role = await uow.roles.get_by_id(role_id)
            if not role or not role.is_active:
                raise NotFound("Role", role_id)
            actor = await uow.users.get_by_id(assigned_by)
        if not user.is_active:
            raise InvalidState(f"User {user_id} is inactive")

        await self._access_guard.require(
            assigned_by, str(AdminPermission.ROLE_ASSIGN.at(role.scope))
        )
        for organization_id, property_id in (
            (user.organization_id, user.property_id),
            (role.organization_id, role.property_id),
        ):
            await require_tenant_authority(
                self._access_guard,
                actor,
                AdminPermission.ROLE_ASSIGN,
                organization_id,
                property_id,
            )
        snapshot = await self._resolver.snapshot(assigned_by)
        missing = [pid for pid in role.permission_ids if not snapshot.allows(pid)]
        if missing:
            raise Forbidden(
                f"Cannot assign role {role.name}: actor lacks {len(missing)} of its permissions"
            )

        if user.role_id == role.id:
            return user

        previous = user.role_id
        # A role in another organization drops the user's old property.
        moves_org = role.organization_id not in (None, user.organization_id)
        updated = replace(
            user,
            role_id=role.id,
            organization_id=role.organization_id or user.organization_id,
            property_id=role.property_id or (None if moves_org else user.property_id),
        )
        async with self._uow_factory() as uow:
            await uow.users.update(updated)

        logger.info(
            "User %s moved from role %s to %s (%s) by %s",
            user_id,
            previous,
            role.id,
            role.name,
            assigned_by,
        )
        return updated
