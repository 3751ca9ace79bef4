"""Pytest fixtures for opsauth tests."""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from opsauth.domain.entities import (
    Invitation,
    Permission,
    Role,
    User,
    UserPermissionOverride,
)
from opsauth.domain.value_objects import (
    AdminPermission,
    InvitationStatus,
    PermissionKey,
    PermissionScope,
)
from opsauth.infrastructure.permission.access_guard import OpsAuthAccessGuard
from opsauth.infrastructure.permission.permission_resolver import OpsAuthPermissionResolver


# --- Fake repositories ---


class FakePermissionRepository:
    """In-memory permission catalog, unique on (resource, action, scope)."""

    def __init__(self, count_references=None) -> None:
        self._by_id: dict[UUID, Permission] = {}
        self._count_references = count_references

    def add(self, permission: Permission) -> Permission:
        self._by_id[permission.id] = permission
        return permission

    async def get_by_id(self, permission_id: UUID) -> Permission | None:
        return self._by_id.get(permission_id)

    async def get_by_key(
        self, resource: str, action: str, scope: PermissionScope
    ) -> Permission | None:
        for p in self._by_id.values():
            if (p.resource, p.action, p.scope) == (resource, action, PermissionScope(scope)):
                return p
        return None

    async def get_many(self, permission_ids: list[UUID]) -> list[Permission]:
        return [self._by_id[i] for i in permission_ids if i in self._by_id]

    async def list_all(
        self,
        *,
        resource: str | None = None,
        scope: PermissionScope | None = None,
    ) -> list[Permission]:
        items = [
            p
            for p in self._by_id.values()
            if (resource is None or p.resource == resource) and (scope is None or p.scope == scope)
        ]
        return sorted(items, key=lambda p: (p.resource, p.action, p.scope.value))

    async def insert_if_absent(self, permission: Permission) -> Permission:
        existing = await self.get_by_key(permission.resource, permission.action, permission.scope)
        if existing:
            return existing
        self._by_id[permission.id] = permission
        return permission

    async def update(self, permission: Permission) -> None:
        self._by_id[permission.id] = permission

    async def delete(self, permission_id: UUID) -> None:
        self._by_id.pop(permission_id, None)

    async def count_references(self, permission_id: UUID) -> int:
        return self._count_references(permission_id) if self._count_references else 0


class FakeRoleRepository:
    """In-memory role repository; the permission set is stored on the role."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, Role] = {}

    def add_role(self, role: Role) -> Role:
        self._by_id[role.id] = role
        return role

    def references(self, permission_id: UUID) -> int:
        return sum(1 for r in self._by_id.values() if permission_id in r.permission_ids)

    async def get_by_id(self, role_id: UUID) -> Role | None:
        return self._by_id.get(role_id)

    async def get_by_name(
        self,
        name: str,
        organization_id: UUID | None = None,
        property_id: UUID | None = None,
    ) -> Role | None:
        for r in self._by_id.values():
            if (r.name, r.organization_id, r.property_id) == (name, organization_id, property_id):
                return r
        return None

    async def list_all(self, *, include_inactive: bool = False) -> list[Role]:
        items = [r for r in self._by_id.values() if include_inactive or r.is_active]
        return sorted(items, key=lambda r: (-r.priority, r.name))

    async def create(self, role: Role) -> Role:
        self._by_id[role.id] = role
        return role

    async def update(self, role: Role) -> None:
        stored = self._by_id.get(role.id)
        permission_ids = stored.permission_ids if stored else role.permission_ids
        self._by_id[role.id] = replace(role, permission_ids=permission_ids)

    async def delete(self, role_id: UUID) -> None:
        self._by_id.pop(role_id, None)

    async def add_permission(self, role_id: UUID, permission_id: UUID) -> None:
        role = self._by_id[role_id]
        self._by_id[role_id] = replace(role, permission_ids=role.permission_ids | {permission_id})

    async def remove_permission(self, role_id: UUID, permission_id: UUID) -> None:
        role = self._by_id[role_id]
        self._by_id[role_id] = replace(role, permission_ids=role.permission_ids - {permission_id})

    async def get_active_permission_ids(self, role_id: UUID) -> frozenset[UUID]:
        role = self._by_id.get(role_id)
        if not role or not role.is_active:
            return frozenset()
        return role.permission_ids


class FakeOverrideRepository:
    """In-memory overrides keyed by (user_id, permission_id)."""

    def __init__(self) -> None:
        self._rows: dict[tuple[UUID, UUID], UserPermissionOverride] = {}

    def references(self, permission_id: UUID) -> int:
        return sum(1 for (_, pid) in self._rows if pid == permission_id)

    def rows_for(self, user_id: UUID) -> list[UserPermissionOverride]:
        return [o for (uid, _), o in self._rows.items() if uid == user_id]

    async def get(self, user_id: UUID, permission_id: UUID) -> UserPermissionOverride | None:
        return self._rows.get((user_id, permission_id))

    async def upsert(self, override: UserPermissionOverride) -> UserPermissionOverride:
        key = (override.user_id, override.permission_id)
        existing = self._rows.get(key)
        stored = replace(
            override,
            id=existing.id if existing else override.id,
            is_active=True,
            revoked_by=None,
            revoked_at=None,
        )
        self._rows[key] = stored
        return stored

    async def deactivate(
        self,
        user_id: UUID,
        permission_id: UUID,
        revoked_by: UUID | None,
        revoked_at: datetime,
    ) -> bool:
        row = self._rows.get((user_id, permission_id))
        if not row:
            return False
        self._rows[(user_id, permission_id)] = replace(
            row, is_active=False, revoked_by=revoked_by, revoked_at=revoked_at
        )
        return True

    async def deactivate_all(
        self, user_id: UUID, revoked_by: UUID | None, revoked_at: datetime
    ) -> int:
        count = 0
        for key, row in list(self._rows.items()):
            if row.user_id == user_id and row.is_active:
                self._rows[key] = replace(
                    row, is_active=False, revoked_by=revoked_by, revoked_at=revoked_at
                )
                count += 1
        return count

    async def list_by_user(self, user_id: UUID) -> list[UserPermissionOverride]:
        return sorted(self.rows_for(user_id), key=lambda o: o.granted_at)

    async def active_for_user(self, user_id: UUID, now: datetime) -> dict[UUID, bool]:
        return {o.permission_id: o.granted for o in self.rows_for(user_id) if o.applies_at(now)}


class FakeInvitationRepository:
    """In-memory invitations. Transitions check and set without awaiting in between."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, Invitation] = {}

    def add(self, invitation: Invitation) -> Invitation:
        self._by_id[invitation.id] = invitation
        return invitation

    def all(self) -> list[Invitation]:
        return list(self._by_id.values())

    async def get_by_id(self, invitation_id: UUID) -> Invitation | None:
        return self._by_id.get(invitation_id)

    async def get_by_token_hash(self, token_hash: str) -> Invitation | None:
        for i in self._by_id.values():
            if i.token_hash == token_hash:
                return i
        return None

    async def get_pending_for_email(self, email: str, now: datetime) -> Invitation | None:
        for i in self._by_id.values():
            if i.email == email and i.status is InvitationStatus.PENDING and i.expires_at > now:
                return i
        return None

    async def create(self, invitation: Invitation) -> Invitation:
        self._by_id[invitation.id] = invitation
        return invitation

    def _transition(self, invitation_id: UUID, **changes) -> bool:
        invitation = self._by_id.get(invitation_id)
        if not invitation or invitation.status is not InvitationStatus.PENDING:
            return False
        self._by_id[invitation_id] = replace(invitation, **changes)
        return True

    async def mark_accepted(self, invitation_id: UUID, accepted_by: UUID, at: datetime) -> bool:
        return self._transition(
            invitation_id,
            status=InvitationStatus.ACCEPTED,
            accepted_by=accepted_by,
            accepted_at=at,
            updated_at=at,
        )

    async def mark_expired(self, invitation_id: UUID, at: datetime) -> bool:
        return self._transition(invitation_id, status=InvitationStatus.EXPIRED, updated_at=at)

    async def mark_cancelled(self, invitation_id: UUID, at: datetime) -> bool:
        return self._transition(invitation_id, status=InvitationStatus.CANCELLED, updated_at=at)

    async def rotate_token(
        self, invitation_id: UUID, token_hash: str, expires_at: datetime, at: datetime
    ) -> bool:
        return self._transition(
            invitation_id, token_hash=token_hash, expires_at=expires_at, updated_at=at
        )

    async def expire_stale(self, now: datetime) -> int:
        stale = [
            i.id
            for i in self._by_id.values()
            if i.status is InvitationStatus.PENDING and i.expires_at < now
        ]
        for invitation_id in stale:
            self._transition(invitation_id, status=InvitationStatus.EXPIRED, updated_at=now)
        return len(stale)

    async def count_by_role(self, role_id: UUID) -> int:
        return sum(1 for i in self._by_id.values() if i.role_id == role_id)


class FakeUserRepository:
    """In-memory user store."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, User] = {}

    def add(self, user: User) -> User:
        self._by_id[user.id] = user
        return user

    async def get_by_id(self, user_id: UUID) -> User | None:
        return self._by_id.get(user_id)

    async def get_by_email(self, email: str) -> User | None:
        for u in self._by_id.values():
            if u.email.lower() == email.lower():
                return u
        return None

    async def get_role_id(self, user_id: UUID) -> UUID | None:
        user = self._by_id.get(user_id)
        return user.role_id if user and user.is_active else None

    async def create(self, user: User) -> User:
        self._by_id[user.id] = user
        return user

    async def update(self, user: User) -> None:
        self._by_id[user.id] = user

    async def count_by_role(self, role_id: UUID) -> int:
        return sum(1 for u in self._by_id.values() if u.role_id == role_id)


class FakeUnitOfWork:
    """In-memory Unit of Work. Writes are visible immediately."""

    def __init__(self) -> None:
        self.roles = FakeRoleRepository()
        self.overrides = FakeOverrideRepository()
        self.invitations = FakeInvitationRepository()
        self.users = FakeUserRepository()
        self.permissions = FakePermissionRepository(
            count_references=lambda pid: self.roles.references(pid) + self.overrides.references(pid)
        )
        self.commits = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        pass


# --- Builders ---


def make_permission(key: str, *, is_system: bool = False, name: str | None = None) -> Permission:
    parsed = PermissionKey.parse(key)
    return Permission(
        id=uuid4(),
        resource=parsed.resource,
        action=parsed.action,
        scope=parsed.scope,
        name=name or key,
        is_system=is_system,
        created_at=datetime.now(UTC),
    )


def make_role(
    name: str = "STAFF",
    permissions: list[Permission] | None = None,
    *,
    organization_id: UUID | None = None,
    property_id: UUID | None = None,
    is_active: bool = True,
    is_system: bool = False,
) -> Role:
    now = datetime.now(UTC)
    return Role(
        id=uuid4(),
        name=name,
        permission_ids=frozenset(p.id for p in permissions or []),
        organization_id=organization_id,
        property_id=property_id,
        is_active=is_active,
        is_system=is_system,
        created_at=now,
        updated_at=now,
    )


def make_user(
    role: Role | None = None,
    *,
    email: str | None = None,
    is_active: bool = True,
    organization_id: UUID | None = None,
    property_id: UUID | None = None,
) -> User:
    user_id = uuid4()
    return User(
        id=user_id,
        email=email or f"{user_id.hex[:8]}@example.com",
        role_id=role.id if role else None,
        created_at=datetime.now(UTC),
        is_active=is_active,
        organization_id=organization_id,
        property_id=property_id,
    )


def make_override(
    user: User,
    permission: Permission,
    granted: bool,
    *,
    granted_by: UUID | None = None,
    is_active: bool = True,
    expires_at: datetime | None = None,
) -> UserPermissionOverride:
    return UserPermissionOverride(
        id=uuid4(),
        user_id=user.id,
        permission_id=permission.id,
        granted=granted,
        granted_by=granted_by or uuid4(),
        granted_at=datetime.now(UTC),
        is_active=is_active,
        expires_at=expires_at,
    )


def make_invitation(
    role: Role,
    invited_by: UUID,
    token_hash: str,
    *,
    email: str = "new.hire@example.com",
    status: InvitationStatus = InvitationStatus.PENDING,
    expires_in: timedelta = timedelta(days=7),
) -> Invitation:
    now = datetime.now(UTC)
    return Invitation(
        id=uuid4(),
        email=email,
        token_hash=token_hash,
        role_id=role.id,
        invited_by=invited_by,
        expires_at=now + expires_in,
        created_at=now,
        updated_at=now,
        status=status,
    )


ADMIN_KEYS = [
    str(admin.at(scope)) for scope in PermissionScope for admin in AdminPermission
] + ["permission.read.platform", "role.read.platform", "user_permission.read.platform"]


def add_permissions(uow: FakeUnitOfWork, *keys: str) -> dict[str, Permission]:
    """Register keys in the fake catalog; returns key -> Permission."""
    return {key: uow.permissions.add(make_permission(key)) for key in keys}


def add_manager(
    uow: FakeUnitOfWork,
    *keys: str,
    permission_ids: frozenset[UUID] = frozenset(),
    department_id: UUID | None = None,
    organization_id: UUID | None = None,
    property_id: UUID | None = None,
) -> User:
    """Active tenant user whose role carries catalog ``keys`` plus ``permission_ids``."""
    by_key = {str(p.key): p.id for p in uow.permissions._by_id.values()}
    role = uow.roles.add_role(make_role("MANAGER"))
    role.permission_ids = frozenset(by_key[k] for k in keys) | permission_ids
    user = make_user(role, organization_id=organization_id, property_id=property_id)
    user.department_id = department_id
    return uow.users.add(user)


# --- Fixtures ---


@pytest.fixture
def uow() -> FakeUnitOfWork:
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(uow):
    """UoW factory yielding the same in-memory UoW for every unit of work in a test."""

    @asynccontextmanager
    async def _factory():
        yield uow

    return _factory


@pytest.fixture
def resolver(uow_factory) -> OpsAuthPermissionResolver:
    return OpsAuthPermissionResolver(uow_factory)


@pytest.fixture
def access_guard(uow_factory, resolver) -> OpsAuthAccessGuard:
    return OpsAuthAccessGuard(uow_factory, resolver)


@pytest.fixture
def admin(uow) -> User:
    """Active user whose platform role holds every administrative permission."""
    permissions = add_permissions(uow, *ADMIN_KEYS)
    role = uow.roles.add_role(
        make_role("PLATFORM_ADMIN", list(permissions.values()), is_system=True)
    )
    return uow.users.add(make_user(role, email="admin@example.com"))


@pytest.fixture
def mock_notifier():
    """Mock invitation notifier."""
    notifier = AsyncMock()
    notifier.send = AsyncMock(return_value=None)
    return notifier
