"""Permission catalog API resources."""

import falcon
import falcon.asgi

from opsauth.application.ports import AccessGuard
from opsauth.application.use_cases.catalog.delete_permission import DeletePermissionUseCase
from opsauth.application.use_cases.catalog.lookup_permission import LookupPermissionUseCase
from opsauth.application.use_cases.catalog.register_permission import RegisterPermissionUseCase
from opsauth.application.use_cases.catalog.update_permission import UpdatePermissionUseCase
from opsauth.domain.value_objects import AdminPermission, PermissionScope
from opsauth.interfaces.api.hooks import require_permission
from opsauth.interfaces.api.params import parse_scope, parse_uuid, read_body, required
from opsauth.interfaces.api.serializers import permission_to_dict

PERMISSION_READ = "permission.read.platform"
PERMISSION_MANAGE = str(AdminPermission.PERMISSION_MANAGE.at(PermissionScope.PLATFORM))


class PermissionsResource:
    """GET/POST /v1/permissions - list or look up, and register permissions."""

    def __init__(
        self,
        unit_of_work_factory: type,
        access_guard: AccessGuard,
        register_permission: RegisterPermissionUseCase,
        lookup_permission: LookupPermissionUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self.access_guard = access_guard
        self._register = register_permission
        self._lookup = lookup_permission

    @require_permission(PERMISSION_READ)
    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """List catalog. ``?key=`` looks up one permission; ``?resource=`` and ``?scope=`` filter."""
        key = req.get_param("key")
        if key:
            permission = await self._lookup.execute_key(key)
            resp.media = permission_to_dict(permission)
            return

        scope = req.get_param("scope")
        async with self._uow_factory() as uow:
            permissions = await uow.permissions.list_all(
                resource=req.get_param("resource"),
                scope=parse_scope(scope) if scope else None,
            )
        resp.media = {"items": [permission_to_dict(p) for p in permissions]}

    @require_permission(PERMISSION_MANAGE)
    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Register permission. Registering an existing triple returns the stored row."""
        body = await read_body(req)
        permission = await self._register.execute(
            resource=required(body, "resource"),
            action=required(body, "action"),
            scope=required(body, "scope"),
            name=required(body, "name"),
            description=body.get("description", ""),
            category=body.get("category"),
        )
        resp.media = permission_to_dict(permission)
        resp.status = falcon.HTTP_201


class PermissionResource:
    """PATCH/DELETE /v1/permissions/{permission_id}."""

    def __init__(
        self,
        access_guard: AccessGuard,
        update_permission: UpdatePermissionUseCase,
        delete_permission: DeletePermissionUseCase,
    ) -> None:
        self.access_guard = access_guard
        self._update = update_permission
        self._delete = delete_permission

    @require_permission(PERMISSION_MANAGE)
    async def on_patch(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, permission_id: str
    ) -> None:
        body = await read_body(req)
        permission = await self._update.execute(
            parse_uuid(permission_id, "permission ID"),
            name=body.get("name"),
            description=body.get("description"),
            category=body.get("category"),
        )
        resp.media = permission_to_dict(permission)

    @require_permission(PERMISSION_MANAGE)
    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, permission_id: str
    ) -> None:
        await self._delete.execute(parse_uuid(permission_id, "permission ID"))
        resp.status = falcon.HTTP_204
