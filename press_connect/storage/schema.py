"""Idempotent table setup for the Postgres store.

Run directly to create tables without starting the API:

    python -m press_connect.storage.schema
"""

import asyncio

from loguru import logger

from press_connect.storage.postgres import PostgresManager

TABLES = ("users", "oauth_tokens", "streams", "recordings", "snapshots")

SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS users (
        user_id VARCHAR(40) PRIMARY KEY,
        username VARCHAR(50) UNIQUE NOT NULL,
        email VARCHAR(255) UNIQUE NOT NULL,
        password_hash VARCHAR(255) NOT NULL,
        is_active BOOLEAN NOT NULL DEFAULT true,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS oauth_tokens (
        credential_id VARCHAR(40) PRIMARY KEY,
        user_id VARCHAR(40) NOT NULL REFERENCES users(user_id) ON DELETE CASCADE,
        provider VARCHAR(50) NOT NULL,
        access_token TEXT NOT NULL,
        refresh_token TEXT,
        token_type VARCHAR(50) NOT NULL DEFAULT 'Bearer',
        expires_at TIMESTAMPTZ,
        scope TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        UNIQUE (user_id, provider)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS streams (
        session_key VARCHAR(40) PRIMARY KEY,
        owner_user_id VARCHAR(40) NOT NULL REFERENCES users(user_id) ON DELETE CASCADE,
        remote_broadcast_id VARCHAR(255) UNIQUE NOT NULL,
        remote_stream_id VARCHAR(255) UNIQUE NOT NULL,
        ingest_key VARCHAR(255) UNIQUE NOT NULL,
        ingest_url TEXT NOT NULL,
        title VARCHAR(255) NOT NULL,
        description TEXT,
        visibility VARCHAR(50) NOT NULL DEFAULT 'public',
        status VARCHAR(50) NOT NULL DEFAULT 'created',
        started_at TIMESTAMPTZ,
        ended_at TIMESTAMPTZ,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS recordings (
        recording_id VARCHAR(40) PRIMARY KEY,
        session_key VARCHAR(40) NOT NULL REFERENCES streams(session_key) ON DELETE CASCADE,
        user_id VARCHAR(40) NOT NULL REFERENCES users(user_id) ON DELETE CASCADE,
        filename VARCHAR(255) NOT NULL,
        file_path TEXT NOT NULL,
        file_size BIGINT,
        duration INTEGER,
        format VARCHAR(50),
        created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS snapshots (
        snapshot_id VARCHAR(40) PRIMARY KEY,
        session_key VARCHAR(40) NOT NULL REFERENCES streams(session_key) ON DELETE CASCADE,
        user_id VARCHAR(40) NOT NULL REFERENCES users(user_id) ON DELETE CASCADE,
        filename VARCHAR(255) NOT NULL,
        file_path TEXT NOT NULL,
        file_size BIGINT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_streams_owner_user_id ON streams(owner_user_id)",
    "CREATE INDEX IF NOT EXISTS idx_streams_status ON streams(status)",
    "CREATE INDEX IF NOT EXISTS idx_recordings_session_key ON recordings(session_key)",
    "CREATE INDEX IF NOT EXISTS idx_snapshots_session_key ON snapshots(session_key)",
)


async def init_schema(db: PostgresManager) -> None:
    """Create all tables and indexes if they do not exist, in one transaction."""
    async with db.transaction() as client:
        for statement in SCHEMA_STATEMENTS:
            await client.execute(statement)
    logger.info("Database tables ready: {}", ", ".join(TABLES))


async def _main() -> None:
    from press_connect.app_config import build_app_settings
    from press_connect.shared.logging import init_logger

    settings = build_app_settings()
    init_logger(settings)

    async with PostgresManager(settings) as db:
        logger.info("Starting database migrations on {}", db.safe_dsn)
        await init_schema(db)


if __name__ == "__main__":
    asyncio.run(_main())
