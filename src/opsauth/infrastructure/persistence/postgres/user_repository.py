"""PostgreSQL user repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from opsauth.domain.entities import User

_COLUMNS = (
    "id, email, role_id, created_at, first_name, last_name, department_id, "
    "organization_id, property_id, position, phone_number, is_active"
)


def _row_to_user(r: tuple) -> User:
    return User(
        id=r[0],
        email=r[1],
        role_id=r[2],
        created_at=r[3],
        first_name=r[4] or "",
        last_name=r[5] or "",
        department_id=r[6],
        organization_id=r[7],
        property_id=r[8],
        position=r[9],
        phone_number=r[10],
        is_active=r[11],
    )


class PostgresUserRepository:
    """User repository implementation over app_user."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, user_id: UUID) -> User | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM app_user WHERE id = %s",
            (user_id,),
        )
        r = await cur.fetchone()
        return _row_to_user(r) if r else None

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email (case-insensitive)."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM app_user WHERE lower(email) = lower(%s)",
            (email,),
        )
        r = await cur.fetchone()
        return _row_to_user(r) if r else None

    async def get_role_id(self, user_id: UUID) -> UUID | None:
        """Role of an active user; None for unknown or inactive users."""
        cur = await self._conn.execute(
            "SELECT role_id FROM app_user WHERE id = %s AND is_active",
            (user_id,),
        )
        r = await cur.fetchone()
        return r[0] if r else None

    async def create(self, user: User) -> User:
        await self._conn.execute(
            f"INSERT INTO app_user ({_COLUMNS}) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                user.id,
                user.email,
                user.role_id,
                user.created_at,
                user.first_name,
                user.last_name,
                user.department_id,
                user.organization_id,
                user.property_id,
                user.position,
                user.phone_number,
                user.is_active,
            ),
        )
        return user

    async def update(self, user: User) -> None:
        await self._conn.execute(
            "UPDATE app_user SET role_id = %s, first_name = %s, last_name = %s, "
            "department_id = %s, organization_id = %s, property_id = %s, position = %s, "
            "phone_number = %s, is_active = %s WHERE id = %s",
            (
                user.role_id,
                user.first_name,
                user.last_name,
                user.department_id,
                user.organization_id,
                user.property_id,
                user.position,
                user.phone_number,
                user.is_active,
                user.id,
            ),
        )

    async def count_by_role(self, role_id: UUID) -> int:
        cur = await self._conn.execute(
            "SELECT count(*) FROM app_user WHERE role_id = %s",
            (role_id,),
        )
        r = await cur.fetchone()
        return int(r[0])
