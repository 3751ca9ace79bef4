"""Startup check that every declared permission requirement exists in the catalog."""

import logging
from typing import Any

from opsauth.application.ports import AccessGuard

logger = logging.getLogger(__name__)


class MissingPermissionKeys(RuntimeError):
    def __init__(self, keys: list[str]) -> None:
        super().__init__(f"Permission keys missing from catalog: {', '.join(keys)}")
        self.keys = keys


class CatalogCheckMiddleware:
    """Refuses startup while route requirements reference unknown permissions.

    Must be listed after PoolLifespanMiddleware so the pool is open.
    """

    def __init__(self, access_guard: AccessGuard, permission_keys: list[str]) -> None:
        self._access_guard = access_guard
        self._permission_keys = permission_keys

    async def process_startup(self, scope: dict[str, Any], event: dict[str, Any]) -> None:
        unknown = await self._access_guard.unknown_keys(self._permission_keys)
        if unknown:
            logger.error("Refusing to start: %s not in catalog (run `opsauth seed`)", unknown)
            raise MissingPermissionKeys(unknown)
        logger.info("All %d declared permission keys present in catalog", len(self._permission_keys))
