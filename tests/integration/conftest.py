import os
import uuid
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio

from rehearsal.config.settings import Settings
from rehearsal.database.connection import close_pool, get_connection, init_pool
from rehearsal.history.postgres_repository import PostgresHistoryRepository


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "rehearsal_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest_asyncio.fixture
async def integration_pool(test_settings: Settings) -> AsyncGenerator[None, None]:
    try:
        await init_pool(test_settings)
    except Exception as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to point at one.")
    try:
        yield
    finally:
        await close_pool()


@pytest.fixture
def test_role() -> str:
    """Unique role so each test only sees its own rows."""
    return f"Integration Tester {uuid.uuid4().hex[:8]}"


@pytest_asyncio.fixture
async def history_repository(
    integration_pool: None, test_role: str
) -> AsyncGenerator[PostgresHistoryRepository, None]:
    repository = PostgresHistoryRepository()
    await repository.ensure_schema()
    try:
        yield repository
    finally:
        async with get_connection() as conn:
            await conn.execute("DELETE FROM interview_history WHERE role = %s", (test_role,))
            await conn.commit()
