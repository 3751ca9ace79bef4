"""PostgreSQL invitation repository implementation.

Status transitions are conditional updates on status = 'PENDING', so a
transition only succeeds for the first of several concurrent callers.
"""

from datetime import datetime
from uuid import UUID

from psycopg import AsyncConnection

from opsauth.domain.entities import Invitation
from opsauth.domain.value_objects import InvitationStatus

_COLUMNS = (
    "id, email, token_hash, role_id, invited_by, expires_at, created_at, updated_at, "
    "status, department_id, message, accepted_at, accepted_by"
)


def _row_to_invitation(r: tuple) -> Invitation:
    return Invitation(
        id=r[0],
        email=r[1],
        token_hash=r[2],
        role_id=r[3],
        invited_by=r[4],
        expires_at=r[5],
        created_at=r[6],
        updated_at=r[7],
        status=InvitationStatus(r[8]),
        department_id=r[9],
        message=r[10],
        accepted_at=r[11],
        accepted_by=r[12],
    )


class PostgresInvitationRepository:
    """Invitation repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, invitation_id: UUID) -> Invitation | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM invitation WHERE id = %s",
            (invitation_id,),
        )
        r = await cur.fetchone()
        return _row_to_invitation(r) if r else None

    async def get_by_token_hash(self, token_hash: str) -> Invitation | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM invitation WHERE token_hash = %s",
            (token_hash,),
        )
        r = await cur.fetchone()
        return _row_to_invitation(r) if r else None

    async def get_pending_for_email(self, email: str, now: datetime) -> Invitation | None:
        """Pending invitation for email that has not yet expired."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM invitation "
            "WHERE email = %s AND status = 'PENDING' AND expires_at > %s "
            "ORDER BY created_at DESC LIMIT 1",
            (email, now),
        )
        r = await cur.fetchone()
        return _row_to_invitation(r) if r else None

    async def create(self, invitation: Invitation) -> Invitation:
        await self._conn.execute(
            f"INSERT INTO invitation ({_COLUMNS}) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                invitation.id,
                invitation.email,
                invitation.token_hash,
                invitation.role_id,
                invitation.invited_by,
                invitation.expires_at,
                invitation.created_at,
                invitation.updated_at,
                invitation.status.value,
                invitation.department_id,
                invitation.message,
                invitation.accepted_at,
                invitation.accepted_by,
            ),
        )
        return invitation

    async def _transition(self, sql: str, params: tuple) -> bool:
        cur = await self._conn.execute(sql, params)
        return await cur.fetchone() is not None

    async def mark_accepted(self, invitation_id: UUID, accepted_by: UUID, at: datetime) -> bool:
        return await self._transition(
            "UPDATE invitation SET status = 'ACCEPTED', accepted_by = %s, accepted_at = %s, "
            "updated_at = %s WHERE id = %s AND status = 'PENDING' RETURNING id",
            (accepted_by, at, at, invitation_id),
        )

    async def mark_expired(self, invitation_id: UUID, at: datetime) -> bool:
        return await self._transition(
            "UPDATE invitation SET status = 'EXPIRED', updated_at = %s "
            "WHERE id = %s AND status = 'PENDING' RETURNING id",
            (at, invitation_id),
        )

    async def mark_cancelled(self, invitation_id: UUID, at: datetime) -> bool:
        return await self._transition(
            "UPDATE invitation SET status = 'CANCELLED', updated_at = %s "
            "WHERE id = %s AND status = 'PENDING' RETURNING id",
            (at, invitation_id),
        )

    async def rotate_token(
        self, invitation_id: UUID, token_hash: str, expires_at: datetime, at: datetime
    ) -> bool:
        return await self._transition(
            "UPDATE invitation SET token_hash = %s, expires_at = %s, updated_at = %s "
            "WHERE id = %s AND status = 'PENDING' RETURNING id",
            (token_hash, expires_at, at, invitation_id),
        )

    async def expire_stale(self, now: datetime) -> int:
        cur = await self._conn.execute(
            "UPDATE invitation SET status = 'EXPIRED', updated_at = %s "
            "WHERE status = 'PENDING' AND expires_at < %s",
            (now, now),
        )
        return cur.rowcount

    async def count_by_role(self, role_id: UUID) -> int:
        cur = await self._conn.execute(
            "SELECT count(*) FROM invitation WHERE role_id = %s",
            (role_id,),
        )
        r = await cur.fetchone()
        return int(r[0])
