"""Role registry API resources."""

import falcon
import falcon.asgi

from opsauth.application.dto.role_dto import RoleCreateInput
from opsauth.application.ports import AccessGuard
from opsauth.application.use_cases.role.assign_role_permission import AssignRolePermissionUseCase
from opsauth.application.use_cases.role.create_role import CreateRoleUseCase
from opsauth.application.use_cases.role.deactivate_role import DeactivateRoleUseCase
from opsauth.application.use_cases.role.delete_role import DeleteRoleUseCase
from opsauth.application.use_cases.role.get_effective_permissions import (
    GetEffectivePermissionsUseCase,
)
from opsauth.application.use_cases.role.revoke_role_permission import RevokeRolePermissionUseCase
from opsauth.domain.exceptions import NotFound
from opsauth.domain.value_objects import AdminPermission, PermissionScope, UserType
from opsauth.interfaces.api.hooks import require_permission
from opsauth.interfaces.api.params import (
    parse_optional_uuid,
    parse_uuid,
    read_body,
    required,
)
from opsauth.interfaces.api.serializers import role_to_dict

ROLE_READ = "role.read.platform"
ROLE_MANAGE = str(AdminPermission.ROLE_MANAGE.at(PermissionScope.PLATFORM))


class RolesResource:
    """GET/POST /v1/roles - list and create roles."""

    def __init__(
        self,
        unit_of_work_factory: type,
        access_guard: AccessGuard,
        create_role: CreateRoleUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self.access_guard = access_guard
        self._create = create_role

    @require_permission(ROLE_READ)
    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        include_inactive = req.get_param_as_bool("include_inactive", default=False)
        async with self._uow_factory() as uow:
            roles = await uow.roles.list_all(include_inactive=include_inactive)
        resp.media = {"items": [role_to_dict(r) for r in roles]}

    @require_permission(ROLE_MANAGE)
    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        body = await read_body(req)
        try:
            user_type = UserType(body.get("user_type", UserType.INTERNAL.value))
        except ValueError:
            raise falcon.HTTPBadRequest(
                title="Bad request", description=f"Invalid user_type: {body.get('user_type')}"
            ) from None
        input_data = RoleCreateInput(
            name=required(body, "name"),
            description=body.get("description", ""),
            priority=int(body.get("priority", 100)),
            permission_ids=[
                parse_uuid(pid, "permission ID") for pid in body.get("permission_ids", [])
            ],
            organization_id=parse_optional_uuid(body.get("organization_id"), "organization ID"),
            property_id=parse_optional_uuid(body.get("property_id"), "property ID"),
            user_type=user_type,
            allowed_modules=list(body.get("allowed_modules", [])),
        )
        role = await self._create.execute(input_data)
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_201


class RoleResource:
    """GET/DELETE /v1/roles/{role_id}; POST .../deactivate; GET .../permissions."""

    def __init__(
        self,
        unit_of_work_factory: type,
        access_guard: AccessGuard,
        get_effective_permissions: GetEffectivePermissionsUseCase,
        deactivate_role: DeactivateRoleUseCase,
        delete_role: DeleteRoleUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self.access_guard = access_guard
        self._effective = get_effective_permissions
        self._deactivate = deactivate_role
        self._delete = delete_role

    @require_permission(ROLE_READ)
    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str) -> None:
        rid = parse_uuid(role_id, "role ID")
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(rid)
        if not role:
            raise NotFound("Role", rid)
        resp.media = role_to_dict(role)

    @require_permission(ROLE_READ)
    async def on_get_permissions(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        """Effective permission ids of an active role."""
        permission_ids = await self._effective.execute(parse_uuid(role_id, "role ID"))
        resp.media = {"items": sorted(str(pid) for pid in permission_ids)}

    @require_permission(ROLE_MANAGE)
    async def on_post_deactivate(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        role = await self._deactivate.execute(parse_uuid(role_id, "role ID"))
        resp.media = role_to_dict(role)

    @require_permission(ROLE_MANAGE)
    async def on_delete(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str) -> None:
        await self._delete.execute(parse_uuid(role_id, "role ID"))
        resp.status = falcon.HTTP_204


class RolePermissionResource:
    """PUT/DELETE /v1/roles/{role_id}/permissions/{permission_id} - idempotent."""

    def __init__(
        self,
        access_guard: AccessGuard,
        assign_permission: AssignRolePermissionUseCase,
        revoke_permission: RevokeRolePermissionUseCase,
    ) -> None:
        self.access_guard = access_guard
        self._assign = assign_permission
        self._revoke = revoke_permission

    @require_permission(ROLE_MANAGE)
    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str, permission_id: str
    ) -> None:
        role = await self._assign.execute(
            parse_uuid(role_id, "role ID"), parse_uuid(permission_id, "permission ID")
        )
        resp.media = role_to_dict(role)

    @require_permission(ROLE_MANAGE)
    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str, permission_id: str
    ) -> None:
        role = await self._revoke.execute(
            parse_uuid(role_id, "role ID"), parse_uuid(permission_id, "permission ID")
        )
        resp.media = role_to_dict(role)
