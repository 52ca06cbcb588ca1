"""Postgres rows for recordings and snapshots."""

from press_connect.domain.utils.idgen import new_recording_id, new_snapshot_id
from press_connect.schemas import Recording, Snapshot
from press_connect.shared.timeutil import utc_now
from press_connect.storage.postgres import PostgresManager

_RECORDING_COLUMNS = (
    "recording_id, session_key, user_id, filename, file_path, file_size, duration, format, created_at"
)
_SNAPSHOT_COLUMNS = "snapshot_id, session_key, user_id, filename, file_path, file_size, created_at"


class MediaStore:
    def __init__(self, db: PostgresManager):
        self.db = db

    async def insert_recording(
        self,
        session_key: str,
        user_id: str,
        filename: str,
        file_path: str,
        file_size: int | None = None,
        duration: int | None = None,
        format: str | None = None,
    ) -> Recording:
        async with self.db.session() as client:
            row = await client.fetchrow(
                f"""
                INSERT INTO recordings
                    (recording_id, session_key, user_id, filename, file_path,
                     file_size, duration, format, created_at)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
                RETURNING {_RECORDING_COLUMNS}
                """,
                new_recording_id(),
                session_key,
                user_id,
                filename,
                file_path,
                file_size,
                duration,
                format,
                utc_now(),
            )
        return Recording.from_record(row)  # type: ignore[arg-type]

    async def list_recordings(self, session_key: str) -> list[Recording]:
        async with self.db.session() as client:
            rows = await client.fetch(
                f"SELECT {_RECORDING_COLUMNS} FROM recordings WHERE session_key = $1 ORDER BY created_at DESC",
                session_key,
            )
        return [Recording.from_record(r) for r in rows]

    async def insert_snapshot(
        self,
        session_key: str,
        user_id: str,
        filename: str,
        file_path: str,
        file_size: int | None = None,
    ) -> Snapshot:
        async with self.db.session() as client:
            row = await client.fetchrow(
                f"""
                INSERT INTO snapshots
                    (snapshot_id, session_key, user_id, filename, file_path, file_size, created_at)
                VALUES ($1, $2, $3, $4, $5, $6, $7)
                RETURNING {_SNAPSHOT_COLUMNS}
                """,
                new_snapshot_id(),
                session_key,
                user_id,
                filename,
                file_path,
                file_size,
                utc_now(),
            )
        return Snapshot.from_record(row)  # type: ignore[arg-type]

    async def list_snapshots(self, session_key: str) -> list[Snapshot]:
        async with self.db.session() as client:
            rows = await client.fetch(
                f"SELECT {_SNAPSHOT_COLUMNS} FROM snapshots WHERE session_key = $1 ORDER BY created_at DESC",
                session_key,
            )
        return [Snapshot.from_record(r) for r in rows]
