from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import psycopg
from psycopg_pool import AsyncConnectionPool

from rehearsal.config.settings import Settings

_pool: AsyncConnectionPool | None = None


def build_conninfo(settings: Settings) -> str:
    return (
        f"host={settings.db_host} "
        f"port={settings.db_port} "
        f"dbname={settings.db_database} "
        f"user={settings.db_username} "
        f"password={settings.db_password}"
    )


async def init_pool(settings: Settings) -> None:
    """Open the global async connection pool from settings."""
    global _pool  # noqa: PLW0603
    pool = AsyncConnectionPool(build_conninfo(settings), min_size=1, max_size=5, open=False)
    await pool.open(wait=True, timeout=10.0)
    _pool = pool


async def close_pool() -> None:
    """Close the global connection pool."""
    global _pool  # noqa: PLW0603
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncGenerator[psycopg.AsyncConnection[Any], None]:
    """Yield a connection from the pool. Caller manages commit/rollback."""
    if _pool is None:
        raise RuntimeError("Connection pool not initialized. Call init_pool() first.")
    async with _pool.connection() as conn:
        yield conn
