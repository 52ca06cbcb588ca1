"""Postgres fixtures. Tests using them skip unless POSTGRES_URL_TEST is set."""

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio

from press_connect.app_config import AppSettings
from press_connect.storage.postgres import PostgresManager
from press_connect.storage.schema import TABLES, init_schema

POSTGRES_URL_TEST = os.environ.get("POSTGRES_URL_TEST")


@pytest.fixture(scope="session")
def pg_dsn() -> str:
    """Get PostgreSQL DSN for testing."""
    if not POSTGRES_URL_TEST:
        pytest.skip("POSTGRES_URL_TEST not set")
    return POSTGRES_URL_TEST


@pytest_asyncio.fixture
async def pg_manager(pg_dsn: str) -> AsyncGenerator[PostgresManager]:
    """A PostgresManager on a freshly initialised, emptied schema."""
    settings = AppSettings(
        JWT_SECRET="test-secret",
        POSTGRES_URL=pg_dsn,
        DB_POOL_MAX_SIZE=5,
    )
    manager = PostgresManager(settings)
    await init_schema(manager)
    async with manager.session() as client:
        await client.execute(f"TRUNCATE {', '.join(TABLES)} CASCADE")
    try:
        yield manager
    finally:
        await manager.close()
