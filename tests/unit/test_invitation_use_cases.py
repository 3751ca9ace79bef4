"""Unit tests for the invitation lifecycle."""

import asyncio
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from opsauth.application.dto.invitation_dto import AcceptProfile, InvitationCreateInput
from opsauth.application.use_cases.invitation.accept_invitation import AcceptInvitationUseCase
from opsauth.application.use_cases.invitation.cancel_invitation import CancelInvitationUseCase
from opsauth.application.use_cases.invitation.create_invitation import CreateInvitationUseCase
from opsauth.application.use_cases.invitation.expire_invitations import ExpireInvitationsUseCase
from opsauth.application.use_cases.invitation.resend_invitation import ResendInvitationUseCase
from opsauth.domain.exceptions import (
    AlreadyProcessed,
    Conflict,
    DeliveryFailed,
    Expired,
    Forbidden,
    InvalidState,
    InvalidToken,
    NotFound,
    ValidationError,
)
from opsauth.domain.value_objects import InvitationStatus, InvitationToken

from tests.conftest import (
    add_manager,
    add_permissions,
    make_invitation,
    make_override,
    make_role,
    make_user,
)

PROFILE = AcceptProfile(first_name="Ada", last_name="Lovelace", position="Night manager")


@pytest.fixture
def org_id():
    return uuid4()


@pytest.fixture
def staff_role(uow, org_id):
    perms = add_permissions(uow, "task.read.property", "task.update.property")
    return uow.roles.add_role(
        make_role("STAFF", list(perms.values()), organization_id=org_id, property_id=uuid4())
    )


@pytest.fixture
def inviter(uow, admin, staff_role):
    """Admin who also holds every permission of the staff role."""
    for permission_id in staff_role.permission_ids:
        uow.roles._by_id[admin.role_id].permission_ids |= {permission_id}
    return admin


@pytest.fixture
def create_invitation(uow_factory, access_guard, resolver, mock_notifier):
    return CreateInvitationUseCase(
        uow_factory,
        access_guard,
        resolver,
        notifier=mock_notifier,
        base_url="https://app.example.com/invite/",
    )


def pending(uow, role, inviter, **kwargs):
    token = InvitationToken.generate()
    invitation = uow.invitations.add(make_invitation(role, inviter.id, token.digest, **kwargs))
    return invitation, token.value


@pytest.mark.asyncio
async def test_create_stores_digest_and_notifies(
    uow, create_invitation, inviter, staff_role, mock_notifier
) -> None:
    issued = await create_invitation.execute(
        InvitationCreateInput(email="  New.Hire@Example.com ", role_id=staff_role.id),
        inviter.id,
    )

    assert len(issued.token) == 64
    assert issued.accept_url == f"https://app.example.com/invite/{issued.token}"
    stored = uow.invitations.all()
    assert len(stored) == 1
    assert stored[0].email == "new.hire@example.com"
    assert stored[0].token_hash == InvitationToken(issued.token).digest
    assert stored[0].token_hash != issued.token
    assert stored[0].status is InvitationStatus.PENDING
    mock_notifier.send.assert_awaited_once()
    message = mock_notifier.send.await_args.args[0]
    assert message.email == "new.hire@example.com"
    assert message.role_name == "STAFF"
    assert not message.reminder


@pytest.mark.asyncio
async def test_create_denied_when_inviter_lacks_role_permissions(
    uow, create_invitation, admin, staff_role, mock_notifier
) -> None:
    # admin can assign property roles but holds none of STAFF's permissions
    with pytest.raises(Forbidden):
        await create_invitation.execute(
            InvitationCreateInput(email="new.hire@example.com", role_id=staff_role.id), admin.id
        )
    assert uow.invitations.all() == []
    mock_notifier.send.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_denied_without_role_assign(
    uow, create_invitation, admin, staff_role
) -> None:
    outsider = uow.users.add(make_user(None))
    with pytest.raises(Forbidden):
        await create_invitation.execute(
            InvitationCreateInput(email="new.hire@example.com", role_id=staff_role.id),
            outsider.id,
        )
    assert uow.invitations.all() == []


@pytest.mark.asyncio
async def test_create_conflicts(uow, create_invitation, inviter, staff_role) -> None:
    uow.users.add(make_user(staff_role, email="taken@example.com"))
    pending(uow, staff_role, inviter, email="waiting@example.com")

    for email in ("TAKEN@example.com", "waiting@example.com"):
        with pytest.raises(Conflict):
            await create_invitation.execute(
                InvitationCreateInput(email=email, role_id=staff_role.id), inviter.id
            )


@pytest.mark.asyncio
async def test_create_allowed_after_previous_invitation_expired(
    uow, create_invitation, inviter, staff_role
) -> None:
    pending(uow, staff_role, inviter, email="late@example.com", expires_in=-timedelta(hours=1))
    issued = await create_invitation.execute(
        InvitationCreateInput(email="late@example.com", role_id=staff_role.id), inviter.id
    )
    assert issued.invitation.email == "late@example.com"


@pytest.mark.asyncio
async def test_create_validation(uow, create_invitation, inviter, staff_role) -> None:
    platform_role = uow.roles.add_role(make_role("AUDITOR"))
    inactive = uow.roles.add_role(make_role("OLD", is_active=False))

    with pytest.raises(ValidationError):
        await create_invitation.execute(
            InvitationCreateInput(email="not-an-email", role_id=staff_role.id), inviter.id
        )
    with pytest.raises(ValidationError):
        await create_invitation.execute(
            InvitationCreateInput(
                email="a@example.com", role_id=platform_role.id, department_id=uuid4()
            ),
            inviter.id,
        )
    for role_id in (inactive.id, uuid4()):
        with pytest.raises(NotFound):
            await create_invitation.execute(
                InvitationCreateInput(email="a@example.com", role_id=role_id), inviter.id
            )


@pytest.mark.asyncio
async def test_delivery_failure_keeps_invitation(
    uow, create_invitation, inviter, staff_role, mock_notifier
) -> None:
    mock_notifier.send.side_effect = DeliveryFailed("webhook down")

    issued = await create_invitation.execute(
        InvitationCreateInput(email="new.hire@example.com", role_id=staff_role.id), inviter.id
    )

    assert uow.invitations.all()[0].id == issued.invitation.id


@pytest.mark.asyncio
async def test_create_without_notifier(
    uow, uow_factory, access_guard, resolver, inviter, staff_role
) -> None:
    use_case = CreateInvitationUseCase(uow_factory, access_guard, resolver)
    issued = await use_case.execute(
        InvitationCreateInput(email="new.hire@example.com", role_id=staff_role.id), inviter.id
    )
    assert issued.accept_url == f"/{issued.token}"


@pytest.mark.asyncio
async def test_accept_provisions_user(uow, uow_factory, inviter, staff_role, org_id) -> None:
    invitation, token = pending(uow, staff_role, inviter)

    accepted = await AcceptInvitationUseCase(uow_factory).execute(token, PROFILE)

    user = accepted.user
    assert user.email == invitation.email
    assert user.role_id == staff_role.id
    assert user.organization_id == org_id
    assert user.property_id == staff_role.property_id
    assert (user.first_name, user.last_name, user.position) == ("Ada", "Lovelace", "Night manager")
    assert accepted.invitation.status is InvitationStatus.ACCEPTED
    assert accepted.invitation.accepted_by == user.id
    assert await uow.users.get_by_id(user.id) is not None


@pytest.mark.asyncio
async def test_platform_role_takes_tenant_from_inviter(uow, uow_factory, admin) -> None:
    admin.organization_id = uuid4()
    role = uow.roles.add_role(make_role("AUDITOR"))
    _, token = pending(uow, role, admin)

    accepted = await AcceptInvitationUseCase(uow_factory).execute(token, PROFILE)

    assert accepted.user.organization_id == admin.organization_id


@pytest.mark.asyncio
async def test_accept_is_single_use(uow, uow_factory, inviter, staff_role) -> None:
    _, token = pending(uow, staff_role, inviter)
    accept = AcceptInvitationUseCase(uow_factory)

    await accept.execute(token, PROFILE)
    with pytest.raises(AlreadyProcessed):
        await accept.execute(token, PROFILE)


@pytest.mark.asyncio
async def test_concurrent_accept_has_one_winner(uow, uow_factory, inviter, staff_role) -> None:
    invitation, token = pending(uow, staff_role, inviter)
    accept = AcceptInvitationUseCase(uow_factory)

    results = await asyncio.gather(
        accept.execute(token, PROFILE),
        accept.execute(token, PROFILE),
        return_exceptions=True,
    )

    winners = [r for r in results if not isinstance(r, Exception)]
    losers = [r for r in results if isinstance(r, Exception)]
    assert len(winners) == 1
    assert len(losers) == 1
    assert isinstance(losers[0], AlreadyProcessed)
    created = [u for u in uow.users._by_id.values() if u.email == invitation.email]
    assert len(created) == 1


@pytest.mark.asyncio
async def test_accept_expired_without_sweep(uow, uow_factory, inviter, staff_role) -> None:
    invitation, token = pending(uow, staff_role, inviter, expires_in=-timedelta(minutes=1))

    with pytest.raises(Expired):
        await AcceptInvitationUseCase(uow_factory).execute(token, PROFILE)

    stored = await uow.invitations.get_by_id(invitation.id)
    assert stored.status is InvitationStatus.EXPIRED
    assert await uow.users.get_by_email(invitation.email) is None


@pytest.mark.asyncio
async def test_accept_unknown_or_malformed_token(uow_factory) -> None:
    accept = AcceptInvitationUseCase(uow_factory)
    with pytest.raises(InvalidToken):
        await accept.execute("short", PROFILE)
    with pytest.raises(InvalidToken):
        await accept.execute(InvitationToken.generate().value, PROFILE)


@pytest.mark.asyncio
async def test_accept_requires_names(uow, uow_factory, inviter, staff_role) -> None:
    _, token = pending(uow, staff_role, inviter)
    with pytest.raises(ValidationError):
        await AcceptInvitationUseCase(uow_factory).execute(
            token, AcceptProfile(first_name=" ", last_name="Lovelace")
        )


@pytest.mark.asyncio
async def test_accept_into_deactivated_role(uow, uow_factory, inviter, staff_role) -> None:
    invitation, token = pending(uow, staff_role, inviter)
    uow.roles._by_id[staff_role.id].is_active = False

    with pytest.raises(InvalidState):
        await AcceptInvitationUseCase(uow_factory).execute(token, PROFILE)
    assert (await uow.invitations.get_by_id(invitation.id)).status is InvitationStatus.PENDING


@pytest.mark.asyncio
async def test_accept_reactivates_user_and_clears_overrides(
    uow, uow_factory, resolver, inviter, staff_role
) -> None:
    perms = add_permissions(uow, "guest.delete.property")
    former = uow.users.add(make_user(None, email="returning@example.com", is_active=False))
    stale = make_override(former, perms["guest.delete.property"], granted=True)
    uow.overrides._rows[(former.id, stale.permission_id)] = stale
    _, token = pending(uow, staff_role, inviter, email="returning@example.com")

    accepted = await AcceptInvitationUseCase(uow_factory).execute(token, PROFILE)

    assert accepted.user.id == former.id
    assert accepted.user.is_active
    assert accepted.user.role_id == staff_role.id
    assert not uow.overrides.rows_for(former.id)[0].is_active
    assert not await resolver.is_allowed(former.id, stale.permission_id)


@pytest.mark.asyncio
async def test_accept_conflicts_with_active_user(uow, uow_factory, inviter, staff_role) -> None:
    uow.users.add(make_user(staff_role, email="dup@example.com"))
    _, token = pending(uow, staff_role, inviter, email="dup@example.com")
    with pytest.raises(Conflict):
        await AcceptInvitationUseCase(uow_factory).execute(token, PROFILE)


@pytest.mark.asyncio
async def test_cancel(uow, uow_factory, access_guard, inviter, staff_role) -> None:
    invitation, token = pending(uow, staff_role, inviter)
    cancel = CancelInvitationUseCase(uow_factory, access_guard)

    await cancel.execute(invitation.id, inviter.id)

    assert (await uow.invitations.get_by_id(invitation.id)).status is InvitationStatus.CANCELLED
    with pytest.raises(InvalidState):
        await cancel.execute(invitation.id, inviter.id)
    with pytest.raises(AlreadyProcessed):
        await AcceptInvitationUseCase(uow_factory).execute(token, PROFILE)
    with pytest.raises(NotFound):
        await cancel.execute(uuid4(), inviter.id)


@pytest.mark.asyncio
async def test_cancel_requires_invitation_manage(
    uow, uow_factory, access_guard, admin, staff_role
) -> None:
    someone = uow.users.add(make_user(None))
    invitation, _ = pending(uow, staff_role, someone)
    with pytest.raises(Forbidden):
        await CancelInvitationUseCase(uow_factory, access_guard).execute(invitation.id, someone.id)


@pytest.mark.asyncio
async def test_resend_rotates_token(
    uow, uow_factory, access_guard, inviter, staff_role, mock_notifier
) -> None:
    invitation, old_token = pending(uow, staff_role, inviter, expires_in=timedelta(hours=1))
    resend = ResendInvitationUseCase(uow_factory, access_guard, notifier=mock_notifier)

    issued = await resend.execute(invitation.id, inviter.id)

    assert issued.token != old_token
    assert issued.invitation.expires_at > invitation.expires_at
    assert mock_notifier.send.await_args.args[0].reminder
    accept = AcceptInvitationUseCase(uow_factory)
    with pytest.raises(InvalidToken):
        await accept.execute(old_token, PROFILE)
    await accept.execute(issued.token, PROFILE)

    with pytest.raises(InvalidState):
        await resend.execute(invitation.id, inviter.id)


@pytest.mark.asyncio
async def test_expire_stale(uow, uow_factory, inviter, staff_role) -> None:
    old, _ = pending(uow, staff_role, inviter, email="a@example.com", expires_in=-timedelta(days=1))
    fresh, _ = pending(uow, staff_role, inviter, email="b@example.com")

    count = await ExpireInvitationsUseCase(uow_factory).execute(datetime.now(UTC))

    assert count == 1
    assert (await uow.invitations.get_by_id(old.id)).status is InvitationStatus.EXPIRED
    assert (await uow.invitations.get_by_id(fresh.id)).status is InvitationStatus.PENDING
    assert await ExpireInvitationsUseCase(uow_factory).execute() == 0


@pytest.mark.asyncio
async def test_create_denied_for_role_in_another_organization(
    uow, create_invitation, admin, staff_role
) -> None:
    outsider = add_manager(
        uow,
        "role.assign.property",
        "role.assign.organization",
        permission_ids=staff_role.permission_ids,
        organization_id=uuid4(),
    )
    with pytest.raises(Forbidden):
        await create_invitation.execute(
            InvitationCreateInput(email="new.hire@example.com", role_id=staff_role.id),
            outsider.id,
        )
    assert uow.invitations.all() == []


@pytest.mark.asyncio
async def test_create_within_own_organization_or_property(
    uow, create_invitation, admin, staff_role, org_id
) -> None:
    org_manager = add_manager(
        uow,
        "role.assign.property",
        "role.assign.organization",
        permission_ids=staff_role.permission_ids,
        organization_id=org_id,
    )
    property_manager = add_manager(
        uow,
        "role.assign.property",
        permission_ids=staff_role.permission_ids,
        organization_id=org_id,
        property_id=staff_role.property_id,
    )
    neighbour = add_manager(
        uow,
        "role.assign.property",
        permission_ids=staff_role.permission_ids,
        organization_id=org_id,
        property_id=uuid4(),
    )

    for n, inviter in enumerate((org_manager, property_manager)):
        await create_invitation.execute(
            InvitationCreateInput(email=f"hire{n}@example.com", role_id=staff_role.id), inviter.id
        )
    with pytest.raises(Forbidden):
        await create_invitation.execute(
            InvitationCreateInput(email="hire2@example.com", role_id=staff_role.id), neighbour.id
        )
    assert len(uow.invitations.all()) == 2


@pytest.mark.asyncio
async def test_property_inviter_limited_to_own_department(
    uow, create_invitation, admin, staff_role, org_id
) -> None:
    inviter = add_manager(
        uow,
        "role.assign.property",
        permission_ids=staff_role.permission_ids,
        department_id=uuid4(),
        organization_id=org_id,
        property_id=staff_role.property_id,
    )

    with pytest.raises(Forbidden):
        await create_invitation.execute(
            InvitationCreateInput(
                email="new.hire@example.com", role_id=staff_role.id, department_id=uuid4()
            ),
            inviter.id,
        )
    issued = await create_invitation.execute(
        InvitationCreateInput(
            email="new.hire@example.com",
            role_id=staff_role.id,
            department_id=inviter.department_id,
        ),
        inviter.id,
    )
    assert issued.invitation.department_id == inviter.department_id


@pytest.mark.asyncio
async def test_cancel_denied_outside_tenant(
    uow, uow_factory, access_guard, inviter, staff_role
) -> None:
    invitation, _ = pending(uow, staff_role, inviter)
    outsider = add_manager(
        uow, "invitation.manage.property", organization_id=uuid4(), property_id=uuid4()
    )

    with pytest.raises(Forbidden):
        await CancelInvitationUseCase(uow_factory, access_guard).execute(
            invitation.id, outsider.id
        )
    assert (await uow.invitations.get_by_id(invitation.id)).status is InvitationStatus.PENDING
