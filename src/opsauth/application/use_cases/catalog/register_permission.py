"""Register permission use case."""

import logging
from datetime import UTC, datetime
from uuid import uuid4

from opsauth.domain.entities import Permission
from opsauth.domain.exceptions import ValidationError
from opsauth.domain.value_objects import PermissionKey

logger = logging.getLogger(__name__)


class RegisterPermissionUseCase:
    """Add a permission to the catalog. Idempotent on (resource, action, scope)."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        resource: str,
        action: str,
        scope: str,
        name: str,
        description: str = "",
        is_system: bool = False,
        category: str | None = None,
    ) -> Permission:
        """Return the existing row when the triple is already registered."""
        try:
            key = PermissionKey(resource=resource, action=action, scope=scope)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        async with self._uow_factory() as uow:
            existing = await uow.permissions.get_by_key(key.resource, key.action, key.scope)
            if existing:
                return existing

            permission = Permission(
                id=uuid4(),
                resource=key.resource,
                action=key.action,
                scope=key.scope,
                name=name,
                description=description,
                is_system=is_system,
                category=category,
                created_at=datetime.now(UTC),
            )
            stored = await uow.permissions.insert_if_absent(permission)

        if stored.id == permission.id:
            logger.info("Registered permission %s (%s)", key, stored.id)
        return stored
