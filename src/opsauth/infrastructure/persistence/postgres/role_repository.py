"""PostgreSQL role repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from opsauth.domain.entities import Role
from opsauth.domain.value_objects import UserType

_COLUMNS = (
    "r.id, r.name, r.description, r.priority, r.organization_id, r.property_id, "
    "r.user_type, r.allowed_modules, r.is_active, r.is_system, r.created_at, r.updated_at, "
    "COALESCE(array_agg(rp.permission_id) FILTER (WHERE rp.permission_id IS NOT NULL), '{}')"
)
_FROM = "FROM role r LEFT JOIN role_permission rp ON rp.role_id = r.id"


def _row_to_role(r: tuple) -> Role:
    return Role(
        id=r[0],
        name=r[1],
        description=r[2] or "",
        priority=r[3],
        organization_id=r[4],
        property_id=r[5],
        user_type=UserType(r[6]),
        allowed_modules=tuple(r[7] or ()),
        is_active=r[8],
        is_system=r[9],
        created_at=r[10],
        updated_at=r[11],
        permission_ids=frozenset(r[12]),
    )


class PostgresRoleRepository:
    """Role repository implementation. Permission membership lives in role_permission."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, role_id: UUID) -> Role | None:
        """Get role by id, with its permission set."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} {_FROM} WHERE r.id = %s GROUP BY r.id",
            (role_id,),
        )
        r = await cur.fetchone()
        return _row_to_role(r) if r else None

    async def get_by_name(
        self,
        name: str,
        organization_id: UUID | None = None,
        property_id: UUID | None = None,
    ) -> Role | None:
        """Get role by name within one tenant context."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} {_FROM} "
            "WHERE r.name = %s "
            "AND r.organization_id IS NOT DISTINCT FROM %s "
            "AND r.property_id IS NOT DISTINCT FROM %s "
            "GROUP BY r.id",
            (name, organization_id, property_id),
        )
        r = await cur.fetchone()
        return _row_to_role(r) if r else None

    async def list_all(self, *, include_inactive: bool = False) -> list[Role]:
        """List roles by descending priority."""
        where = "" if include_inactive else "WHERE r.is_active "
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} {_FROM} {where}GROUP BY r.id ORDER BY r.priority DESC, r.name"
        )
        rows = await cur.fetchall()
        return [_row_to_role(r) for r in rows]

    async def create(self, role: Role) -> Role:
        """Create role and its initial permission set."""
        await self._conn.execute(
            "INSERT INTO role (id, name, description, priority, organization_id, property_id, "
            "user_type, allowed_modules, is_active, is_system, created_at, updated_at) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, "
            "COALESCE(%s, now()), COALESCE(%s, now()))",
            (
                role.id,
                role.name,
                role.description,
                role.priority,
                role.organization_id,
                role.property_id,
                role.user_type.value,
                list(role.allowed_modules),
                role.is_active,
                role.is_system,
                role.created_at,
                role.updated_at,
            ),
        )
        for permission_id in role.permission_ids:
            await self.add_permission(role.id, permission_id)
        return role

    async def update(self, role: Role) -> None:
        await self._conn.execute(
            "UPDATE role SET name = %s, description = %s, priority = %s, "
            "allowed_modules = %s, is_active = %s, updated_at = COALESCE(%s, now()) "
            "WHERE id = %s",
            (
                role.name,
                role.description,
                role.priority,
                list(role.allowed_modules),
                role.is_active,
                role.updated_at,
                role.id,
            ),
        )

    async def delete(self, role_id: UUID) -> None:
        """Delete role. role_permission rows cascade."""
        await self._conn.execute("DELETE FROM role WHERE id = %s", (role_id,))

    async def add_permission(self, role_id: UUID, permission_id: UUID) -> None:
        await self._conn.execute(
            "INSERT INTO role_permission (role_id, permission_id) VALUES (%s, %s) "
            "ON CONFLICT DO NOTHING",
            (role_id, permission_id),
        )

    async def remove_permission(self, role_id: UUID, permission_id: UUID) -> None:
        await self._conn.execute(
            "DELETE FROM role_permission WHERE role_id = %s AND permission_id = %s",
            (role_id, permission_id),
        )

    async def get_active_permission_ids(self, role_id: UUID) -> frozenset[UUID]:
        cur = await self._conn.execute(
            "SELECT rp.permission_id FROM role_permission rp "
            "JOIN role r ON r.id = rp.role_id "
            "WHERE rp.role_id = %s AND r.is_active",
            (role_id,),
        )
        rows = await cur.fetchall()
        return frozenset(r[0] for r in rows)
