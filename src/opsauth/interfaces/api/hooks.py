"""Declarative permission requirements for resource responders.

    class RolesResource:
        @require_permission("role.manage.platform")
        async def on_post(self, req, resp): ...

The resource must expose ``access_guard``. Every key passed here is recorded
so the app can verify at startup that the catalog contains it.
"""

import falcon
import falcon.asgi

from opsauth.domain.exceptions import Forbidden, PermissionKeyUnknown
from opsauth.domain.value_objects import DenialReason
from opsauth.interfaces.api.params import current_user

_declared_keys: set[str] = set()


def declared_permission_keys() -> list[str]:
    return sorted(_declared_keys)


def declare_permission_keys(*permission_keys: str) -> None:
    """Record keys a resource checks itself rather than through the hook."""
    _declared_keys.update(permission_keys)


def require_permission(*permission_keys: str):
    """Falcon before-hook: caller must hold every key (logical AND)."""
    _declared_keys.update(permission_keys)

    async def hook(
        req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, params: dict
    ) -> None:
        user = current_user(req)
        decision = await resource.access_guard.check(user.user_id, *permission_keys)
        if decision.allowed:
            return
        if decision.reason is DenialReason.PERMISSION_KEY_UNKNOWN:
            raise PermissionKeyUnknown(decision.permission_key)
        raise Forbidden(f"Missing permission {decision.permission_key}")

    return falcon.before(hook)
