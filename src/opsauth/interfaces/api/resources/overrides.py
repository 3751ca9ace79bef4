"""User permission override API resources."""

import falcon
import falcon.asgi

from opsauth.application.ports import AccessGuard
from opsauth.application.use_cases.override.deactivate_override import DeactivateOverrideUseCase
from opsauth.application.use_cases.override.get_permission_summary import (
    GetPermissionSummaryUseCase,
)
from opsauth.application.use_cases.override.set_override import SetOverrideUseCase
from opsauth.application.use_cases.role.assign_user_role import AssignUserRoleUseCase
from opsauth.interfaces.api.hooks import declare_permission_keys
from opsauth.interfaces.api.params import (
    current_user,
    parse_datetime,
    parse_uuid,
    read_body,
    required,
)
from opsauth.interfaces.api.serializers import override_to_dict, summary_to_dict, user_to_dict

USER_PERMISSION_READ = "user_permission.read.platform"

declare_permission_keys(USER_PERMISSION_READ)


class UserPermissionsResource:
    """GET /v1/users/{user_id}/permissions - where a user's permissions come from.

    Users may read their own summary; reading anyone else's requires
    user_permission.read.platform.
    """

    def __init__(
        self, access_guard: AccessGuard, get_permission_summary: GetPermissionSummaryUseCase
    ) -> None:
        self.access_guard = access_guard
        self._summary = get_permission_summary

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str) -> None:
        caller = current_user(req)
        uid = parse_uuid(user_id, "user ID")
        if uid != caller.user_id:
            await self.access_guard.require(caller.user_id, USER_PERMISSION_READ)
        summary = await self._summary.execute(uid)
        resp.media = summary_to_dict(summary)


class UserPermissionResource:
    """PUT/DELETE /v1/users/{user_id}/permissions/{permission_id}.

    Authority is checked by the use cases against the permission's scope.
    """

    def __init__(
        self,
        set_override: SetOverrideUseCase,
        deactivate_override: DeactivateOverrideUseCase,
    ) -> None:
        self._set = set_override
        self._deactivate = deactivate_override

    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str, permission_id: str
    ) -> None:
        """Body: ``{"granted": bool, "expires_at": iso8601 | null}``."""
        caller = current_user(req)
        body = await read_body(req)
        granted = required(body, "granted")
        if not isinstance(granted, bool):
            raise falcon.HTTPBadRequest(title="Bad request", description="granted must be a boolean")
        override = await self._set.execute(
            user_id=parse_uuid(user_id, "user ID"),
            permission_id=parse_uuid(permission_id, "permission ID"),
            granted=granted,
            granted_by=caller.user_id,
            expires_at=parse_datetime(body.get("expires_at"), "expires_at"),
        )
        resp.media = override_to_dict(override)

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str, permission_id: str
    ) -> None:
        caller = current_user(req)
        await self._deactivate.execute(
            parse_uuid(user_id, "user ID"),
            parse_uuid(permission_id, "permission ID"),
            revoked_by=caller.user_id,
        )
        resp.status = falcon.HTTP_204


class UserRoleResource:
    """PUT /v1/users/{user_id}/role - move a user onto another role.

    Authority is checked by the use case against the role's scope and tenant.
    """

    def __init__(self, assign_user_role: AssignUserRoleUseCase) -> None:
        self._assign = assign_user_role

    async def on_put(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str) -> None:
        """Body: ``{"role_id": uuid}``."""
        caller = current_user(req)
        body = await read_body(req)
        user = await self._assign.execute(
            parse_uuid(user_id, "user ID"),
            parse_uuid(required(body, "role_id"), "role ID"),
            assigned_by=caller.user_id,
        )
        resp.media = user_to_dict(user)
