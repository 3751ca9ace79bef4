"""Create invitation use case."""

import logging
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from opsauth.application.dto.invitation_dto import (
    InvitationCreateInput,
    InvitationIssued,
    InvitationMessage,
)
from opsauth.application.ports import AccessGuard, InvitationNotifier, PermissionResolver
from opsauth.application.use_cases.tenancy import require_tenant_authority
from opsauth.domain.entities import Invitation
from opsauth.domain.exceptions import (
    Conflict,
    DeliveryFailed,
    Forbidden,
    NotFound,
    ValidationError,
)
from opsauth.domain.value_objects import (
    AdminPermission,
    InvitationStatus,
    InvitationToken,
    PermissionScope,
)

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    email = email.strip().lower()
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        raise ValidationError(f"Invalid email address: {email!r}")
    return email


def accept_url(base_url: str, token: InvitationToken) -> str:
    return f"{base_url.rstrip('/')}/{token.value}"


async def notify(notifier: InvitationNotifier | None, message: InvitationMessage) -> None:
    """Hand the message to the delivery channel; failures never undo the invitation."""
    if notifier is None:
        logger.debug("No invitation notifier configured, skipping delivery to %s", message.email)
        return
    try:
        await notifier.send(message)
    except DeliveryFailed as e:
        logger.warning("Invitation delivery to %s failed: %s", message.email, e)


class CreateInvitationUseCase:
    """Issue a single-use invitation binding an email to a role."""

    def __init__(
        self,
        unit_of_work_factory: type,
        access_guard: AccessGuard,
        permission_resolver: PermissionResolver,
        notifier: InvitationNotifier | None = None,
        expiry_days: int = 7,
        base_url: str = "",
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._access_guard = access_guard
        self._resolver = permission_resolver
        self._notifier = notifier
        self._expiry = timedelta(days=expiry_days)
        self._base_url = base_url

    async def execute(self, data: InvitationCreateInput, inviter_id: UUID) -> InvitationIssued:
        """Create a PENDING invitation.

        The inviter must hold role.assign at the role's scope, must administer
        the role's tenant and must itself be allowed every permission the role
        carries.

        Raises:
            NotFound: Role does not exist or is inactive.
            ValidationError: Bad email, or a department on a platform role.
            Conflict: Active user or live pending invitation for the email.
            Forbidden: Inviter lacks authority or the role is outside their tenant.
        """
        email = normalize_email(data.email)
        now = datetime.now(UTC)

        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(data.role_id)
            if not role or not role.is_active:
                raise NotFound("Role", data.role_id)
            if data.department_id is not None and role.scope is PermissionScope.PLATFORM:
                raise ValidationError("Platform roles cannot be bound to a department")
            user = await uow.users.get_by_email(email)
            if user and user.is_active:
                raise Conflict(f"User with email {email} already exists")
            if await uow.invitations.get_pending_for_email(email, now):
                raise Conflict(f"Pending invitation for {email} already exists")
            inviter = await uow.users.get_by_id(inviter_id)

        await self._access_guard.require(
            inviter_id, str(AdminPermission.ROLE_ASSIGN.at(role.scope))
        )
        reach = await require_tenant_authority(
            self._access_guard,
            inviter,
            AdminPermission.ROLE_ASSIGN,
            role.organization_id,
            role.property_id,
        )
        if (
            reach is PermissionScope.PROPERTY
            and inviter.department_id is not None
            and data.department_id != inviter.department_id
        ):
            raise Forbidden("Property-level inviters can only invite into their own department")
        snapshot = await self._resolver.snapshot(inviter_id)
        missing = [pid for pid in role.permission_ids if not snapshot.allows(pid)]
        if missing:
            raise Forbidden(
                f"Cannot invite to role {role.name}: inviter lacks {len(missing)} of its permissions"
            )

        token = InvitationToken.generate()
        invitation = Invitation(
            id=uuid4(),
            email=email,
            token_hash=token.digest,
            role_id=role.id,
            invited_by=inviter_id,
            expires_at=now + self._expiry,
            created_at=now,
            updated_at=now,
            status=InvitationStatus.PENDING,
            department_id=data.department_id,
            message=data.message,
        )
        async with self._uow_factory() as uow:
            invitation = await uow.invitations.create(invitation)

        logger.info(
            "Invitation %s created for %s (role %s) by %s",
            invitation.id,
            email,
            role.name,
            inviter_id,
        )

        url = accept_url(self._base_url, token)
        await notify(
            self._notifier,
            InvitationMessage(
                email=email,
                role_name=role.name,
                accept_url=url,
                expires_at=invitation.expires_at,
                message=data.message,
            ),
        )
        return InvitationIssued(invitation=invitation, token=token.value, accept_url=url)
