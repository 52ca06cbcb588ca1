"""Stream-session rows keyed by session_key."""

from datetime import datetime

import asyncpg
from loguru import logger

from press_connect.domain.utils.idgen import new_session_key
from press_connect.schemas import SessionState, StreamSession
from press_connect.shared.timeutil import utc_now
from press_connect.storage.postgres import PostgresManager
from press_connect.utils.app_errors import AppError, AppErrorCode, HttpStatusCode, not_found

_SESSION_COLUMNS = (
    "session_key, owner_user_id, remote_broadcast_id, remote_stream_id, ingest_key, "
    "ingest_url, title, description, visibility, status, started_at, ended_at, "
    "created_at, updated_at"
)


def conflict(errmesg: str = "Stream already exists") -> AppError:
    return AppError(
        errcode=AppErrorCode.E_CONFLICT,
        errmesg=errmesg,
        status_code=HttpStatusCode.CONFLICT,
    )


class SessionRegistry:
    """
    Persistence for stream sessions.

    Which transitions are legal is decided by the orchestrator. `set_status`
    only guarantees the row is still in the state the orchestrator checked,
    so two racing writers cannot both apply.
    """

    def __init__(self, db: PostgresManager):
        self.db = db

    async def create(
        self,
        owner_user_id: str,
        remote_broadcast_id: str,
        remote_stream_id: str,
        ingest_key: str,
        ingest_url: str,
        title: str,
        description: str | None = None,
        visibility: str = "public",
    ) -> StreamSession:
        now = utc_now()
        try:
            async with self.db.session() as client:
                row = await client.fetchrow(
                    f"""
                    INSERT INTO streams
                        (session_key, owner_user_id, remote_broadcast_id, remote_stream_id,
                         ingest_key, ingest_url, title, description, visibility, status,
                         created_at, updated_at)
                    VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $11)
                    RETURNING {_SESSION_COLUMNS}
                    """,
                    new_session_key(),
                    owner_user_id,
                    remote_broadcast_id,
                    remote_stream_id,
                    ingest_key,
                    ingest_url,
                    title,
                    description,
                    visibility,
                    SessionState.CREATED.value,
                    now,
                )
        except asyncpg.UniqueViolationError as exc:
            logger.warning("Stream insert rejected by unique constraint: {}", exc.constraint_name)
            raise conflict() from exc

        session = StreamSession.from_record(row)  # type: ignore[arg-type]
        logger.info(
            "Stored stream {} for user {} (broadcast={})",
            session.session_key,
            owner_user_id,
            remote_broadcast_id,
        )
        return session

    async def get_by_key(self, session_key: str) -> StreamSession | None:
        async with self.db.session() as client:
            row = await client.fetchrow(
                f"SELECT {_SESSION_COLUMNS} FROM streams WHERE session_key = $1",
                session_key,
            )
        return StreamSession.from_record(row) if row else None

    async def list_active(self, owner_user_id: str | None = None) -> list[StreamSession]:
        """Sessions in created/starting/active, newest first."""
        statuses = [s.value for s in SessionState.active_states()]
        async with self.db.session() as client:
            if owner_user_id is None:
                rows = await client.fetch(
                    f"""
                    SELECT {_SESSION_COLUMNS} FROM streams
                    WHERE status = ANY($1::text[])
                    ORDER BY created_at DESC
                    """,
                    statuses,
                )
            else:
                rows = await client.fetch(
                    f"""
                    SELECT {_SESSION_COLUMNS} FROM streams
                    WHERE owner_user_id = $1 AND status = ANY($2::text[])
                    ORDER BY created_at DESC
                    """,
                    owner_user_id,
                    statuses,
                )
        return [StreamSession.from_record(r) for r in rows]

    async def set_status(
        self,
        session_key: str,
        new_status: SessionState,
        started_at: datetime | None = None,
        ended_at: datetime | None = None,
        expected_status: SessionState | None = None,
    ) -> StreamSession | None:
        """
        Write status and any given timestamps; bumps updated_at.

        With `expected_status` the write only lands while the row is still in
        that state, and None is returned when it has moved on. Without it a
        missing row raises E_SESSION_NOT_FOUND.
        """
        expected = SessionState(expected_status).value if expected_status is not None else None
        async with self.db.session() as client:
            row = await client.fetchrow(
                f"""
                UPDATE streams
                SET status = $2,
                    started_at = COALESCE($3, started_at),
                    ended_at = COALESCE($4, ended_at),
                    updated_at = $5
                WHERE session_key = $1
                  AND ($6::text IS NULL OR status = $6::text)
                RETURNING {_SESSION_COLUMNS}
                """,
                session_key,
                SessionState(new_status).value,
                started_at,
                ended_at,
                utc_now(),
                expected,
            )
        if row is None:
            if expected is not None:
                return None
            raise not_found(session_key)
        return StreamSession.from_record(row)

    async def delete(self, session_key: str) -> StreamSession | None:
        async with self.db.session() as client:
            row = await client.fetchrow(
                f"DELETE FROM streams WHERE session_key = $1 RETURNING {_SESSION_COLUMNS}",
                session_key,
            )
        return StreamSession.from_record(row) if row else None
