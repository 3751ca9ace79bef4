"""PostgreSQL user permission override repository implementation."""

from datetime import datetime
from uuid import UUID

from psycopg import AsyncConnection

from opsauth.domain.entities import UserPermissionOverride

_COLUMNS = (
    "id, user_id, permission_id, granted, granted_by, granted_at, "
    "is_active, expires_at, revoked_by, revoked_at"
)


def _row_to_override(r: tuple) -> UserPermissionOverride:
    return UserPermissionOverride(
        id=r[0],
        user_id=r[1],
        permission_id=r[2],
        granted=r[3],
        granted_by=r[4],
        granted_at=r[5],
        is_active=r[6],
        expires_at=r[7],
        revoked_by=r[8],
        revoked_at=r[9],
    )


class PostgresOverrideRepository:
    """Override repository. One row per (user_id, permission_id), kept after deactivation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get(self, user_id: UUID, permission_id: UUID) -> UserPermissionOverride | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM user_permission_override "
            "WHERE user_id = %s AND permission_id = %s",
            (user_id, permission_id),
        )
        r = await cur.fetchone()
        return _row_to_override(r) if r else None

    async def upsert(self, override: UserPermissionOverride) -> UserPermissionOverride:
        """Insert or replace the row for (user_id, permission_id); revocation is cleared."""
        cur = await self._conn.execute(
            f"INSERT INTO user_permission_override ({_COLUMNS}) "
            "VALUES (%s, %s, %s, %s, %s, %s, true, %s, NULL, NULL) "
            "ON CONFLICT (user_id, permission_id) DO UPDATE SET "
            "granted = EXCLUDED.granted, granted_by = EXCLUDED.granted_by, "
            "granted_at = EXCLUDED.granted_at, is_active = true, "
            "expires_at = EXCLUDED.expires_at, revoked_by = NULL, revoked_at = NULL "
            f"RETURNING {_COLUMNS}",
            (
                override.id,
                override.user_id,
                override.permission_id,
                override.granted,
                override.granted_by,
                override.granted_at,
                override.expires_at,
            ),
        )
        r = await cur.fetchone()
        return _row_to_override(r)

    async def deactivate(
        self,
        user_id: UUID,
        permission_id: UUID,
        revoked_by: UUID | None,
        revoked_at: datetime,
    ) -> bool:
        """Deactivate the row. False when no row exists."""
        cur = await self._conn.execute(
            "UPDATE user_permission_override "
            "SET is_active = false, revoked_by = %s, revoked_at = %s "
            "WHERE user_id = %s AND permission_id = %s",
            (revoked_by, revoked_at, user_id, permission_id),
        )
        return cur.rowcount > 0

    async def deactivate_all(
        self, user_id: UUID, revoked_by: UUID | None, revoked_at: datetime
    ) -> int:
        cur = await self._conn.execute(
            "UPDATE user_permission_override "
            "SET is_active = false, revoked_by = %s, revoked_at = %s "
            "WHERE user_id = %s AND is_active",
            (revoked_by, revoked_at, user_id),
        )
        return cur.rowcount

    async def list_by_user(self, user_id: UUID) -> list[UserPermissionOverride]:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM user_permission_override "
            "WHERE user_id = %s ORDER BY granted_at",
            (user_id,),
        )
        rows = await cur.fetchall()
        return [_row_to_override(r) for r in rows]

    async def active_for_user(self, user_id: UUID, now: datetime) -> dict[UUID, bool]:
        cur = await self._conn.execute(
            "SELECT permission_id, granted FROM user_permission_override "
            "WHERE user_id = %s AND is_active AND (expires_at IS NULL OR expires_at > %s)",
            (user_id, now),
        )
        rows = await cur.fetchall()
        return {r[0]: r[1] for r in rows}
