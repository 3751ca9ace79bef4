"""Create role use case."""

import logging
from datetime import UTC, datetime
from uuid import UUID, uuid4

from opsauth.application.dto.role_dto import RoleCreateInput
from opsauth.application.ports import UnitOfWork
from opsauth.domain.entities import Role
from opsauth.domain.exceptions import (
    Conflict,
    InvalidPermission,
    ScopeMismatch,
    ValidationError,
)
from opsauth.domain.value_objects import PermissionScope

logger = logging.getLogger(__name__)


async def validate_role_permissions(
    uow: UnitOfWork, role_scope: PermissionScope, permission_ids: list[UUID]
) -> None:
    """Every id must exist and be no broader than the role's scope."""
    if not permission_ids:
        return
    wanted = set(permission_ids)
    permissions = await uow.permissions.get_many(list(wanted))
    missing = wanted - {p.id for p in permissions}
    if missing:
        raise InvalidPermission(
            f"Unknown permission ids: {', '.join(sorted(str(m) for m in missing))}"
        )
    for permission in permissions:
        if not role_scope.covers(permission.scope):
            raise ScopeMismatch(
                f"A {role_scope.value}-scoped role cannot carry {permission.key}"
            )


class CreateRoleUseCase:
    """Create a role with an initial permission set."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, input_data: RoleCreateInput) -> Role:
        name = input_data.name.strip()
        if not name:
            raise ValidationError("Role name is required")
        if input_data.property_id and not input_data.organization_id:
            raise ValidationError("A property-scoped role requires an organization")

        now = datetime.now(UTC)
        role = Role(
            id=uuid4(),
            name=name,
            description=input_data.description,
            priority=input_data.priority,
            permission_ids=frozenset(input_data.permission_ids),
            organization_id=input_data.organization_id,
            property_id=input_data.property_id,
            user_type=input_data.user_type,
            allowed_modules=tuple(input_data.allowed_modules),
            created_at=now,
            updated_at=now,
        )

        async with self._uow_factory() as uow:
            existing = await uow.roles.get_by_name(
                name, input_data.organization_id, input_data.property_id
            )
            if existing:
                raise Conflict("A role with this name already exists in this context")

            await validate_role_permissions(uow, role.scope, input_data.permission_ids)
            await uow.roles.create(role)

        logger.info(
            "Created role %s (%s) at %s scope with %d permissions",
            role.name,
            role.id,
            role.scope.value,
            len(role.permission_ids),
        )
        return role
