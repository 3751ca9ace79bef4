"""Tenant boundary between an acting user and the role or user they act on."""

import logging
from uuid import UUID

from opsauth.application.ports import AccessGuard
from opsauth.domain.entities import User
from opsauth.domain.exceptions import Forbidden
from opsauth.domain.value_objects import AdminPermission, PermissionScope

logger = logging.getLogger(__name__)


async def _holds(
    access_guard: AccessGuard, actor_id: UUID, admin: AdminPermission, scope: PermissionScope
) -> bool:
    decision = await access_guard.check(actor_id, str(admin.at(scope)))
    return decision.allowed


async def require_tenant_authority(
    access_guard: AccessGuard,
    actor: User | None,
    admin: AdminPermission,
    organization_id: UUID | None,
    property_id: UUID | None,
) -> PermissionScope:
    """Check that the actor administers the tenant a target belongs to.

    Holding ``admin`` at platform scope reaches every tenant. Holding it at
    organization scope reaches the actor's own organization and its properties.
    Otherwise only the actor's own property is reachable. A target with no
    tenant is platform-level.

    Returns:
        The breadth of authority that reached the target.

    Raises:
        Forbidden: The target lies outside every tenant the actor administers.
    """
    if actor is not None and await _holds(access_guard, actor.id, admin, PermissionScope.PLATFORM):
        return PermissionScope.PLATFORM
    if actor is None or (organization_id is None and property_id is None):
        raise Forbidden(f"{admin.at(PermissionScope.PLATFORM)} required for platform-level targets")

    if (
        organization_id is not None
        and organization_id == actor.organization_id
        and await _holds(access_guard, actor.id, admin, PermissionScope.ORGANIZATION)
    ):
        return PermissionScope.ORGANIZATION
    if property_id is not None and property_id == actor.property_id:
        return PermissionScope.PROPERTY

    logger.warning(
        "User %s denied %s outside their tenant (organization %s, property %s)",
        actor.id,
        admin.value,
        organization_id,
        property_id,
    )
    raise Forbidden(f"Target is outside the tenant of user {actor.id}")
