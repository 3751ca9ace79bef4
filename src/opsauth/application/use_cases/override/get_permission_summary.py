"""User permission summary use case."""

from uuid import UUID

from opsauth.application.dto.role_dto import PermissionSummary
from opsauth.application.ports import PermissionResolver
from opsauth.domain.exceptions import NotFound


class GetPermissionSummaryUseCase:
    """Break a user's effective permissions down by source."""

    def __init__(self, unit_of_work_factory: type, permission_resolver: PermissionResolver) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = permission_resolver

    async def execute(self, user_id: UUID) -> PermissionSummary:
        async with self._uow_factory() as uow:
            user = await uow.users.get_by_id(user_id)
        if not user:
            raise NotFound("User", user_id)

        snapshot = await self._resolver.snapshot(user_id)
        ids = set(snapshot.role_permission_ids) | set(snapshot.overrides)
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(user.role_id) if user.role_id else None
            by_id = {p.id: p for p in await uow.permissions.get_many(list(ids))}
            history = await uow.overrides.list_by_user(user_id)

        def _sorted(permission_ids):
            return sorted(
                (by_id[i] for i in permission_ids if i in by_id),
                key=lambda p: str(p.key),
            )

        return PermissionSummary(
            user_id=user_id,
            role=role,
            role_permissions=_sorted(snapshot.role_permission_ids),
            granted=_sorted(i for i, g in snapshot.overrides.items() if g),
            denied=_sorted(i for i, g in snapshot.overrides.items() if not g),
            effective=_sorted(i for i in ids if snapshot.allows(i)),
            overrides=history,
        )
