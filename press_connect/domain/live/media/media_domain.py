"""Media registry: recordings and snapshots attached to a stream."""

from loguru import logger

from press_connect.domain.live.session import SessionRegistry
from press_connect.schemas import Recording, Snapshot
from press_connect.utils.app_errors import AppError, AppErrorCode, HttpStatusCode, forbidden, not_found

from .media_store import MediaStore


def _require(value: str | None, field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise AppError(
            errcode=AppErrorCode.E_VALIDATION,
            errmesg=f"{field} is required",
            status_code=HttpStatusCode.BAD_REQUEST,
        )
    return value


class MediaRegistry:
    """Every operation first checks the stream exists and belongs to the caller."""

    def __init__(self, registry: SessionRegistry, store: MediaStore):
        self.registry = registry
        self.store = store

    async def _check_owner(self, user_id: str, session_key: str) -> None:
        session = await self.registry.get_by_key(session_key)
        if session is None:
            raise not_found(session_key)
        if not session.is_owned_by(user_id):
            raise forbidden()

    async def add_recording(
        self,
        user_id: str,
        session_key: str,
        filename: str,
        file_path: str,
        file_size: int | None = None,
        duration: int | None = None,
        format: str | None = None,
    ) -> Recording:
        filename = _require(filename, "filename")
        file_path = _require(file_path, "file_path")
        await self._check_owner(user_id, session_key)

        recording = await self.store.insert_recording(
            session_key, user_id, filename, file_path, file_size, duration, format
        )
        logger.info("Recorded {} for stream {}", recording.recording_id, session_key)
        return recording

    async def add_snapshot(
        self,
        user_id: str,
        session_key: str,
        filename: str,
        file_path: str,
        file_size: int | None = None,
    ) -> Snapshot:
        filename = _require(filename, "filename")
        file_path = _require(file_path, "file_path")
        await self._check_owner(user_id, session_key)

        snapshot = await self.store.insert_snapshot(session_key, user_id, filename, file_path, file_size)
        logger.info("Snapshot {} for stream {}", snapshot.snapshot_id, session_key)
        return snapshot

    async def list_recordings(self, user_id: str, session_key: str) -> list[Recording]:
        await self._check_owner(user_id, session_key)
        return await self.store.list_recordings(session_key)

    async def list_snapshots(self, user_id: str, session_key: str) -> list[Snapshot]:
        await self._check_owner(user_id, session_key)
        return await self.store.list_snapshots(session_key)
