"""
Shared fixtures for PostgreSQL integration tests.

Every test in this package is skipped when the database configured by
DATABASE_URL cannot be reached.
"""

from collections.abc import AsyncGenerator

import psycopg
import pytest
import pytest_asyncio
from psycopg_pool import AsyncConnectionPool

from hoaxify.adapters.repository.postgres import PostgresAccountRepository, run_migrations
from hoaxify.config.settings import get_settings


@pytest.fixture(scope="session")
def database_url() -> str:
    """Database URL, or skip when PostgreSQL is not running."""
    url = get_settings().database_url
    try:
        with psycopg.connect(url, connect_timeout=2) as conn:
            conn.execute("SELECT 1")
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL not reachable: {e}")
    return url


@pytest_asyncio.fixture
async def pool(database_url: str) -> AsyncGenerator[AsyncConnectionPool, None]:
    """Migrated, emptied database behind a fresh pool."""
    pool = AsyncConnectionPool(conninfo=database_url, min_size=1, max_size=10, open=False)
    await pool.open(wait=True)
    await run_migrations(pool)
    async with pool.connection() as conn:
        await conn.execute("DELETE FROM users")
        await conn.commit()
    yield pool
    await pool.close()


@pytest.fixture
def pg_repository(pool: AsyncConnectionPool) -> PostgresAccountRepository:
    """Create repository instance for each test."""
    return PostgresAccountRepository(pool)
