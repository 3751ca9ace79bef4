"""Falcon ASGI application."""

from dataclasses import dataclass

import falcon.asgi
from falcon.asgi import App
from psycopg_pool import AsyncConnectionPool

from opsauth.application.ports import AccessGuard
from opsauth.application.use_cases.catalog.delete_permission import DeletePermissionUseCase
from opsauth.application.use_cases.catalog.lookup_permission import LookupPermissionUseCase
from opsauth.application.use_cases.catalog.register_permission import RegisterPermissionUseCase
from opsauth.application.use_cases.catalog.update_permission import UpdatePermissionUseCase
from opsauth.application.use_cases.invitation.accept_invitation import AcceptInvitationUseCase
from opsauth.application.use_cases.invitation.cancel_invitation import CancelInvitationUseCase
from opsauth.application.use_cases.invitation.create_invitation import CreateInvitationUseCase
from opsauth.application.use_cases.invitation.resend_invitation import ResendInvitationUseCase
from opsauth.application.use_cases.override.deactivate_override import DeactivateOverrideUseCase
from opsauth.application.use_cases.override.get_permission_summary import (
    GetPermissionSummaryUseCase,
)
from opsauth.application.use_cases.override.set_override import SetOverrideUseCase
from opsauth.application.use_cases.role.assign_role_permission import AssignRolePermissionUseCase
from opsauth.application.use_cases.role.assign_user_role import AssignUserRoleUseCase
from opsauth.application.use_cases.role.create_role import CreateRoleUseCase
from opsauth.application.use_cases.role.deactivate_role import DeactivateRoleUseCase
from opsauth.application.use_cases.role.delete_role import DeleteRoleUseCase
from opsauth.application.use_cases.role.get_effective_permissions import (
    GetEffectivePermissionsUseCase,
)
from opsauth.application.use_cases.role.revoke_role_permission import RevokeRolePermissionUseCase
from opsauth.interfaces.api.errors import register_error_handlers
from opsauth.interfaces.api.resources.access import AccessResource
from opsauth.interfaces.api.resources.health import HealthResource
from opsauth.interfaces.api.resources.invitations import (
    InvitationAcceptResource,
    InvitationActionResource,
    InvitationsResource,
)
from opsauth.interfaces.api.resources.overrides import (
    UserPermissionResource,
    UserPermissionsResource,
    UserRoleResource,
)
from opsauth.interfaces.api.resources.permissions import PermissionResource, PermissionsResource
from opsauth.interfaces.api.resources.roles import (
    RolePermissionResource,
    RoleResource,
    RolesResource,
)


@dataclass
class UseCases:
    """Use cases exposed over HTTP."""

    register_permission: RegisterPermissionUseCase
    lookup_permission: LookupPermissionUseCase
    update_permission: UpdatePermissionUseCase
    delete_permission: DeletePermissionUseCase
    create_role: CreateRoleUseCase
    assign_role_permission: AssignRolePermissionUseCase
    revoke_role_permission: RevokeRolePermissionUseCase
    get_effective_permissions: GetEffectivePermissionsUseCase
    deactivate_role: DeactivateRoleUseCase
    delete_role: DeleteRoleUseCase
    assign_user_role: AssignUserRoleUseCase
    set_override: SetOverrideUseCase
    deactivate_override: DeactivateOverrideUseCase
    get_permission_summary: GetPermissionSummaryUseCase
    create_invitation: CreateInvitationUseCase
    accept_invitation: AcceptInvitationUseCase
    cancel_invitation: CancelInvitationUseCase
    resend_invitation: ResendInvitationUseCase


def create_app(
    unit_of_work_factory: type,
    access_guard: AccessGuard,
    use_cases: UseCases,
    middleware: list | None = None,
    pool: AsyncConnectionPool | None = None,
) -> App:
    """Create Falcon ASGI app with routes and error handlers."""
    uc = use_cases
    app = falcon.asgi.App(middleware=middleware or [])
    register_error_handlers(app)

    health = HealthResource(pool)
    app.add_route("/v1/health", health)
    app.add_route("/v1/health/ready", health, suffix="ready")

    app.add_route(
        "/v1/permissions",
        PermissionsResource(
            unit_of_work_factory, access_guard, uc.register_permission, uc.lookup_permission
        ),
    )
    app.add_route(
        "/v1/permissions/{permission_id}",
        PermissionResource(access_guard, uc.update_permission, uc.delete_permission),
    )

    app.add_route("/v1/roles", RolesResource(unit_of_work_factory, access_guard, uc.create_role))
    role = RoleResource(
        unit_of_work_factory,
        access_guard,
        uc.get_effective_permissions,
        uc.deactivate_role,
        uc.delete_role,
    )
    app.add_route("/v1/roles/{role_id}", role)
    app.add_route("/v1/roles/{role_id}/permissions", role, suffix="permissions")
    app.add_route("/v1/roles/{role_id}/deactivate", role, suffix="deactivate")
    app.add_route(
        "/v1/roles/{role_id}/permissions/{permission_id}",
        RolePermissionResource(
            access_guard, uc.assign_role_permission, uc.revoke_role_permission
        ),
    )

    app.add_route(
        "/v1/users/{user_id}/permissions",
        UserPermissionsResource(access_guard, uc.get_permission_summary),
    )
    app.add_route("/v1/users/{user_id}/role", UserRoleResource(uc.assign_user_role))
    app.add_route(
        "/v1/users/{user_id}/permissions/{permission_id}",
        UserPermissionResource(uc.set_override, uc.deactivate_override),
    )

    app.add_route("/v1/invitations", InvitationsResource(uc.create_invitation))
    app.add_route(
        "/v1/invitations/{invitation}/accept", InvitationAcceptResource(uc.accept_invitation)
    )
    actions = InvitationActionResource(uc.cancel_invitation, uc.resend_invitation)
    app.add_route("/v1/invitations/{invitation}/cancel", actions, suffix="cancel")
    app.add_route("/v1/invitations/{invitation}/resend", actions, suffix="resend")

    app.add_route("/v1/access", AccessResource(access_guard))
    return app
