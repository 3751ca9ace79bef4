"""Access guard - translates declared permission keys into resolver verdicts."""

import logging
from uuid import UUID

from opsauth.application.dto.access_decision import AccessDecision
from opsauth.application.ports import PermissionResolver
from opsauth.domain.exceptions import Forbidden, PermissionKeyUnknown
from opsauth.domain.value_objects import DenialReason, PermissionKey

logger = logging.getLogger(__name__)


class OpsAuthAccessGuard:
    """Checks that a caller holds every declared permission (logical AND).

    Read-only: a denial is a returned value, never a write or an exception.
    """

    def __init__(self, unit_of_work_factory: type, resolver: PermissionResolver) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = resolver

    async def _lookup(
        self, permission_keys: tuple[str, ...] | list[str]
    ) -> tuple[dict[str, UUID], list[str]]:
        """Map keys to permission ids; return (found, unknown)."""
        found: dict[str, UUID] = {}
        unknown: list[str] = []
        async with self._uow_factory() as uow:
            for raw in permission_keys:
                try:
                    key = PermissionKey.parse(raw)
                except ValueError:
                    unknown.append(raw)
                    continue
                permission = await uow.permissions.get_by_key(key.resource, key.action, key.scope)
                if permission is None:
                    unknown.append(raw)
                else:
                    found[raw] = permission.id
        return found, unknown

    async def check(self, user_id: UUID, *permission_keys: str) -> AccessDecision:
        """Allow only if every key exists in the catalog and resolves to allow."""
        if not permission_keys:
            return AccessDecision.allow()

        found, unknown = await self._lookup(permission_keys)
        if unknown:
            logger.error(
                "Permission requirement %s is not in the catalog (user %s)",
                unknown[0],
                user_id,
            )
            return AccessDecision.deny(DenialReason.PERMISSION_KEY_UNKNOWN, unknown[0])

        snapshot = await self._resolver.snapshot(user_id)
        for raw in permission_keys:
            if not snapshot.allows(found[raw]):
                logger.warning("Permission %s denied for user %s", raw, user_id)
                return AccessDecision.deny(DenialReason.PERMISSION_DENIED, raw)

        logger.debug("Permissions %s granted for user %s", list(permission_keys), user_id)
        return AccessDecision.allow()

    async def require(self, user_id: UUID, *permission_keys: str) -> None:
        """Raise Forbidden or PermissionKeyUnknown unless check() allows."""
        decision = await self.check(user_id, *permission_keys)
        if decision.allowed:
            return
        if decision.reason is DenialReason.PERMISSION_KEY_UNKNOWN:
            raise PermissionKeyUnknown(decision.permission_key)
        raise Forbidden(f"Missing permission {decision.permission_key}")

    async def unknown_keys(self, permission_keys: list[str]) -> list[str]:
        """Keys that are malformed or absent from the catalog."""
        _, unknown = await self._lookup(permission_keys)
        return unknown
