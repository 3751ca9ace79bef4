"""Seed the system permission catalog and system roles."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from opsauth.domain.entities import Permission, Role
from opsauth.domain.value_objects import PermissionKey, UserType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PermissionSeed:
    key: str
    name: str
    description: str = ""
    category: str | None = None


@dataclass(frozen=True)
class RoleSeed:
    """System role; ``patterns`` may use ``*`` for any resource, action or scope."""

    name: str
    description: str
    priority: int
    user_type: UserType = UserType.INTERNAL
    patterns: tuple[str, ...] = ()
    allowed_modules: tuple[str, ...] = field(default_factory=tuple)


@dataclass
class SeedResult:
    permissions_created: int = 0
    roles_created: int = 0
    role_permissions_added: int = 0


def matches_pattern(key: PermissionKey, pattern: str) -> bool:
    """True when every token of ``pattern`` is ``*`` or equals the key's token."""
    parts = pattern.split(".")
    if len(parts) != 3:
        return False
    return all(
        expected in ("*", actual)
        for expected, actual in zip(parts, (key.resource, key.action, key.scope.value))
    )


class SeedCatalogUseCase:
    """Register system permissions and platform-wide system roles. Safe to re-run."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permissions: list[PermissionSeed],
        roles: list[RoleSeed],
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permissions = permissions
        self._roles = roles

    async def execute(self) -> SeedResult:
        result = SeedResult()
        now = datetime.now(UTC)

        async with self._uow_factory() as uow:
            catalog: list[Permission] = []
            for seed in self._permissions:
                key = PermissionKey.parse(seed.key)
                candidate = Permission(
                    id=uuid4(),
                    resource=key.resource,
                    action=key.action,
                    scope=key.scope,
                    name=seed.name,
                    description=seed.description,
                    is_system=True,
                    category=seed.category,
                    created_at=now,
                )
                stored = await uow.permissions.insert_if_absent(candidate)
                if stored.id == candidate.id:
                    result.permissions_created += 1
                catalog.append(stored)

            for seed in self._roles:
                role = await uow.roles.get_by_name(seed.name)
                if role is None:
                    role = await uow.roles.create(
                        Role(
                            id=uuid4(),
                            name=seed.name,
                            description=seed.description,
                            priority=seed.priority,
                            user_type=seed.user_type,
                            allowed_modules=seed.allowed_modules,
                            is_system=True,
                            created_at=now,
                            updated_at=now,
                        )
                    )
                    result.roles_created += 1

                wanted = {
                    p.id
                    for p in catalog
                    if any(matches_pattern(p.key, pattern) for pattern in seed.patterns)
                }
                for permission_id in wanted - role.permission_ids:
                    await uow.roles.add_permission(role.id, permission_id)
                    result.role_permissions_added += 1

        logger.info(
            "Seeded catalog: %d permissions created, %d roles created, %d role permissions added",
            result.permissions_created,
            result.roles_created,
            result.role_permissions_added,
        )
        return result
