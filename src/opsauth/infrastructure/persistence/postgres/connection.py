"""PostgreSQL async connection pool."""

from psycopg_pool import AsyncConnectionPool


def create_pool(conninfo: str, min_size: int = 2, max_size: int = 10) -> AsyncConnectionPool:
    """Create async connection pool.

    Pool is created with open=False. Caller must call await pool.open()
    before use (PoolLifespanMiddleware in the ASGI app, or the CLI commands).
    """
    return AsyncConnectionPool(
        conninfo=conninfo,
        min_size=min_size,
        max_size=max_size,
        open=False,
    )


async def ping(pool: AsyncConnectionPool) -> bool:
    """Round-trip one query through the pool."""
    async with pool.connection() as conn:
        cur = await conn.execute("SELECT 1")
        return (await cur.fetchone()) is not None
