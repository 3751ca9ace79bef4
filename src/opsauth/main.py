"""Application entry point and composition root."""

import argparse
import asyncio
import logging

from opsauth import __version__
from opsauth.application.ports import AccessGuard, InvitationNotifier, PermissionResolver
from opsauth.application.use_cases.catalog.delete_permission import DeletePermissionUseCase
from opsauth.application.use_cases.catalog.lookup_permission import LookupPermissionUseCase
from opsauth.application.use_cases.catalog.register_permission import RegisterPermissionUseCase
from opsauth.application.use_cases.catalog.seed_catalog import SeedCatalogUseCase
from opsauth.application.use_cases.catalog.update_permission import UpdatePermissionUseCase
from opsauth.application.use_cases.invitation.accept_invitation import AcceptInvitationUseCase
from opsauth.application.use_cases.invitation.cancel_invitation import CancelInvitationUseCase
from opsauth.application.use_cases.invitation.create_invitation import CreateInvitationUseCase
from opsauth.application.use_cases.invitation.expire_invitations import ExpireInvitationsUseCase
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
from opsauth.config import Settings, get_settings
from opsauth.infrastructure.auth.keycloak_provider import KeycloakProvider
from opsauth.infrastructure.notification.http_notifier import HttpInvitationNotifier
from opsauth.infrastructure.permission.access_guard import OpsAuthAccessGuard
from opsauth.infrastructure.permission.permission_resolver import OpsAuthPermissionResolver
from opsauth.infrastructure.persistence.postgres.connection import create_pool
from opsauth.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from opsauth.infrastructure.seed.system_catalog import SYSTEM_ROLES, build_permission_seeds
from opsauth.interfaces.api.app import UseCases, create_app
from opsauth.interfaces.api.hooks import declared_permission_keys
from opsauth.interfaces.api.middleware.auth import AuthMiddleware
from opsauth.interfaces.api.middleware.catalog_check import CatalogCheckMiddleware
from opsauth.interfaces.api.middleware.cors import CORSMiddleware
from opsauth.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
from opsauth.logging_config import configure_logging

logger = logging.getLogger(__name__)


def build_use_cases(
    unit_of_work_factory,
    access_guard: AccessGuard,
    permission_resolver: PermissionResolver,
    notifier: InvitationNotifier | None = None,
    invitation_expiry_days: int = 7,
    invitation_base_url: str = "",
) -> UseCases:
    """Wire every HTTP-facing use case to one unit-of-work factory."""
    return UseCases(
        register_permission=RegisterPermissionUseCase(unit_of_work_factory),
        lookup_permission=LookupPermissionUseCase(unit_of_work_factory),
        update_permission=UpdatePermissionUseCase(unit_of_work_factory),
        delete_permission=DeletePermissionUseCase(unit_of_work_factory),
        create_role=CreateRoleUseCase(unit_of_work_factory),
        assign_role_permission=AssignRolePermissionUseCase(unit_of_work_factory),
        revoke_role_permission=RevokeRolePermissionUseCase(unit_of_work_factory),
        get_effective_permissions=GetEffectivePermissionsUseCase(unit_of_work_factory),
        deactivate_role=DeactivateRoleUseCase(unit_of_work_factory),
        delete_role=DeleteRoleUseCase(unit_of_work_factory),
        assign_user_role=AssignUserRoleUseCase(
            unit_of_work_factory, access_guard, permission_resolver
        ),
        set_override=SetOverrideUseCase(
            unit_of_work_factory, access_guard, permission_resolver
        ),
        deactivate_override=DeactivateOverrideUseCase(unit_of_work_factory, access_guard),
        get_permission_summary=GetPermissionSummaryUseCase(
            unit_of_work_factory, permission_resolver
        ),
        create_invitation=CreateInvitationUseCase(
            unit_of_work_factory,
            access_guard,
            permission_resolver,
            notifier=notifier,
            expiry_days=invitation_expiry_days,
            base_url=invitation_base_url,
        ),
        accept_invitation=AcceptInvitationUseCase(unit_of_work_factory),
        cancel_invitation=CancelInvitationUseCase(unit_of_work_factory, access_guard),
        resend_invitation=ResendInvitationUseCase(
            unit_of_work_factory,
            access_guard,
            notifier=notifier,
            expiry_days=invitation_expiry_days,
            base_url=invitation_base_url,
        ),
    )


def _create_pool(settings: Settings):
    return create_pool(
        settings.database_url,
        min_size=settings.database_pool_min_size,
        max_size=settings.database_pool_max_size,
    )


def create_opsauth_app():
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    configure_logging("DEBUG" if settings.debug else settings.log_level)
    logger.info("Starting opsauth v%s (%s)", __version__, settings.environment)
    pool = _create_pool(settings)
    uow_factory = create_uow_factory(pool)

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logger.warning(
            "KEYCLOAK_CLIENT_SECRET is not set; all authenticated routes will answer 401"
        )

    notifier = (
        HttpInvitationNotifier(settings.invitation_webhook_url)
        if settings.invitation_webhook_url
        else None
    )

    resolver = OpsAuthPermissionResolver(uow_factory)
    access_guard = OpsAuthAccessGuard(uow_factory, resolver)
    use_cases = build_use_cases(
        uow_factory,
        access_guard,
        resolver,
        notifier=notifier,
        invitation_expiry_days=settings.invitation_expiry_days,
        invitation_base_url=settings.invitation_base_url,
    )

    return create_app(
        uow_factory,
        access_guard,
        use_cases,
        middleware=[
            CORSMiddleware(settings.cors_origin_list),
            PoolLifespanMiddleware(pool),
            CatalogCheckMiddleware(access_guard, declared_permission_keys()),
            AuthMiddleware(keycloak),
        ],
        pool=pool,
    )


async def seed(settings: Settings) -> None:
    """Install the system catalog and system roles."""
    pool = _create_pool(settings)
    await pool.open(wait=True)
    try:
        use_case = SeedCatalogUseCase(
            create_uow_factory(pool), build_permission_seeds(), SYSTEM_ROLES
        )
        result = await use_case.execute()
    finally:
        await pool.close()
    print(
        f"Seeded {result.permissions_created} permissions, {result.roles_created} roles, "
        f"{result.role_permissions_added} role permissions"
    )


async def expire_invitations(settings: Settings) -> None:
    """Sweep stale PENDING invitations to EXPIRED."""
    pool = _create_pool(settings)
    await pool.open(wait=True)
    try:
        count = await ExpireInvitationsUseCase(create_uow_factory(pool)).execute()
    finally:
        await pool.close()
    print(f"Expired {count} invitations")


def run_server(settings: Settings) -> None:
    """Run uvicorn server."""
    import uvicorn

    app = create_opsauth_app()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="opsauth", description="Permission-based authorization service"
    )
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("serve", help="Run the HTTP API")
    sub.add_parser("seed", help="Install system permissions and roles (idempotent)")
    sub.add_parser("expire-invitations", help="Mark stale pending invitations as expired")
    sub.add_parser("version", help="Print version")
    args = parser.parse_args(argv)

    if args.command in (None, "version"):
        print(f"opsauth v{__version__}")
        return

    settings = get_settings()
    configure_logging(settings.log_level)
    if args.command == "serve":
        run_server(settings)
    elif args.command == "seed":
        asyncio.run(seed(settings))
    elif args.command == "expire-invitations":
        asyncio.run(expire_invitations(settings))


if __name__ == "__main__":
    main()
