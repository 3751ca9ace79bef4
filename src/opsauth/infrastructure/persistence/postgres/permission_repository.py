"""PostgreSQL permission catalog repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from opsauth.domain.entities import Permission
from opsauth.domain.value_objects import PermissionScope

_COLUMNS = "id, resource, action, scope, name, description, is_system, category, created_at"


def _row_to_permission(r: tuple) -> Permission:
    return Permission(
        id=r[0],
        resource=r[1],
        action=r[2],
        scope=PermissionScope(r[3]),
        name=r[4],
        description=r[5] or "",
        is_system=r[6],
        category=r[7],
        created_at=r[8],
    )


class PostgresPermissionRepository:
    """Permission catalog repository. The (resource, action, scope) triple is unique."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, permission_id: UUID) -> Permission | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission WHERE id = %s",
            (permission_id,),
        )
        r = await cur.fetchone()
        return _row_to_permission(r) if r else None

    async def get_by_key(
        self, resource: str, action: str, scope: PermissionScope
    ) -> Permission | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission "
            "WHERE resource = %s AND action = %s AND scope = %s",
            (resource, action, scope.value),
        )
        r = await cur.fetchone()
        return _row_to_permission(r) if r else None

    async def get_many(self, permission_ids: list[UUID]) -> list[Permission]:
        if not permission_ids:
            return []
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission WHERE id = ANY(%s)",
            (list(permission_ids),),
        )
        rows = await cur.fetchall()
        return [_row_to_permission(r) for r in rows]

    async def list_all(
        self,
        *,
        resource: str | None = None,
        scope: PermissionScope | None = None,
    ) -> list[Permission]:
        """List catalog, optionally filtered, ordered by key."""
        conditions = []
        params: list = []
        if resource is not None:
            conditions.append("resource = %s")
            params.append(resource)
        if scope is not None:
            conditions.append("scope = %s")
            params.append(scope.value)
        where = f"WHERE {' AND '.join(conditions)} " if conditions else ""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission {where}ORDER BY resource, action, scope",
            params,
        )
        rows = await cur.fetchall()
        return [_row_to_permission(r) for r in rows]

    async def insert_if_absent(self, permission: Permission) -> Permission:
        """Insert unless the triple exists; concurrent callers converge on one row."""
        await self._conn.execute(
            f"INSERT INTO permission ({_COLUMNS}) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, COALESCE(%s, now())) "
            "ON CONFLICT (resource, action, scope) DO NOTHING",
            (
                permission.id,
                permission.resource,
                permission.action,
                permission.scope.value,
                permission.name,
                permission.description,
                permission.is_system,
                permission.category,
                permission.created_at,
            ),
        )
        stored = await self.get_by_key(permission.resource, permission.action, permission.scope)
        assert stored is not None
        return stored

    async def update(self, permission: Permission) -> None:
        """Update descriptive fields. The triple is immutable."""
        await self._conn.execute(
            "UPDATE permission SET name = %s, description = %s, category = %s WHERE id = %s",
            (permission.name, permission.description, permission.category, permission.id),
        )

    async def delete(self, permission_id: UUID) -> None:
        await self._conn.execute(
            "DELETE FROM permission WHERE id = %s",
            (permission_id,),
        )

    async def count_references(self, permission_id: UUID) -> int:
        cur = await self._conn.execute(
            "SELECT (SELECT count(*) FROM role_permission WHERE permission_id = %s) "
            "+ (SELECT count(*) FROM user_permission_override WHERE permission_id = %s)",
            (permission_id, permission_id),
        )
        r = await cur.fetchone()
        return int(r[0])
