"""Accept invitation use case."""

import logging
from datetime import UTC, datetime
from uuid import uuid4

from opsauth.application.dto.invitation_dto import AcceptProfile, InvitationAccepted
from opsauth.domain.entities import User
from opsauth.domain.exceptions import (
    AlreadyProcessed,
    Conflict,
    Expired,
    InvalidState,
    InvalidToken,
    ValidationError,
)
from opsauth.domain.value_objects import InvitationStatus, InvitationToken

logger = logging.getLogger(__name__)


class AcceptInvitationUseCase:
    """Redeem an invitation token and provision the invited user."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, token: str, profile: AcceptProfile) -> InvitationAccepted:
        """Claim the invitation and create (or reactivate) its user.

        Only one concurrent caller can claim a given invitation; the others get
        AlreadyProcessed. An expired invitation is moved to EXPIRED before
        Expired is raised.
        """
        if not profile.first_name.strip() or not profile.last_name.strip():
            raise ValidationError("first_name and last_name are required")
        try:
            digest = InvitationToken(token).digest
        except ValueError as e:
            raise InvalidToken("Unknown invitation token") from e

        now = datetime.now(UTC)
        expired_id = None
        async with self._uow_factory() as uow:
            invitation = await uow.invitations.get_by_token_hash(digest)
            if not invitation:
                raise InvalidToken("Unknown invitation token")
            if invitation.status is not InvitationStatus.PENDING:
                raise AlreadyProcessed(
                    f"Invitation {invitation.id} is already {invitation.status.value.lower()}"
                )
            if invitation.is_expired(now):
                await uow.invitations.mark_expired(invitation.id, now)
                expired_id = invitation.id
            else:
                user = await self._provision(uow, invitation, profile, now)
                accepted = await uow.invitations.get_by_id(invitation.id)

        if expired_id is not None:
            logger.info("Invitation %s expired before acceptance", expired_id)
            raise Expired(f"Invitation {expired_id} has expired")

        logger.info("Invitation %s accepted by user %s", invitation.id, user.id)
        return InvitationAccepted(user=user, invitation=accepted)

    async def _provision(self, uow, invitation, profile: AcceptProfile, now: datetime) -> User:
        existing = await uow.users.get_by_email(invitation.email)
        if existing and existing.is_active:
            raise Conflict(f"User with email {invitation.email} already exists")

        role = await uow.roles.get_by_id(invitation.role_id)
        if not role or not role.is_active:
            raise InvalidState(f"Role {invitation.role_id} is no longer active")
        inviter = await uow.users.get_by_id(invitation.invited_by)
        organization_id = role.organization_id or (inviter.organization_id if inviter else None)
        property_id = role.property_id or (inviter.property_id if inviter else None)

        user_id = existing.id if existing else uuid4()
        if not await uow.invitations.mark_accepted(invitation.id, user_id, now):
            raise AlreadyProcessed(f"Invitation {invitation.id} was processed concurrently")

        if existing:
            existing.role_id = role.id
            existing.department_id = invitation.department_id
            existing.organization_id = organization_id
            existing.property_id = property_id
            existing.first_name = profile.first_name.strip()
            existing.last_name = profile.last_name.strip()
            existing.position = profile.position
            existing.phone_number = profile.phone_number
            existing.is_active = True
            await uow.users.update(existing)
            cleared = await uow.overrides.deactivate_all(existing.id, None, now)
            if cleared:
                logger.info(
                    "Cleared %d stale overrides for reactivated user %s", cleared, existing.id
                )
            return existing

        return await uow.users.create(
            User(
                id=user_id,
                email=invitation.email,
                role_id=role.id,
                created_at=now,
                first_name=profile.first_name.strip(),
                last_name=profile.last_name.strip(),
                department_id=invitation.department_id,
                organization_id=organization_id,
                property_id=property_id,
                position=profile.position,
                phone_number=profile.phone_number,
            )
        )
