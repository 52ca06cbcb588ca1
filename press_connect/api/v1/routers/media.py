from fastapi import APIRouter, Depends

from press_connect.api.v1.dependency import CurrentUser, get_media_registry
from press_connect.api.v1.schemas.base import ApiOut
from press_connect.api.v1.schemas.media import (
    RecordingIn,
    RecordingListOut,
    SnapshotIn,
    SnapshotListOut,
)
from press_connect.domain.live.media import MediaRegistry
from press_connect.schemas import Recording, Snapshot

router = APIRouter(prefix="/streams/{session_key}")


@router.post("/recordings", status_code=201)
async def add_recording(
    session_key: str,
    body: RecordingIn,
    user: CurrentUser,
    media: MediaRegistry = Depends(get_media_registry),
) -> ApiOut[Recording]:
    recording = await media.add_recording(
        user.user_id,
        session_key,
        filename=body.filename,
        file_path=body.file_path,
        file_size=body.file_size,
        duration=body.duration,
        format=body.format,
    )
    return ApiOut[Recording](results=recording)


@router.get("/recordings")
async def list_recordings(
    session_key: str,
    user: CurrentUser,
    media: MediaRegistry = Depends(get_media_registry),
) -> ApiOut[RecordingListOut]:
    recordings = await media.list_recordings(user.user_id, session_key)
    return ApiOut[RecordingListOut](
        results=RecordingListOut(recordings=recordings, count=len(recordings))
    )


@router.post("/snapshots", status_code=201)
async def add_snapshot(
    session_key: str,
    body: SnapshotIn,
    user: CurrentUser,
    media: MediaRegistry = Depends(get_media_registry),
) -> ApiOut[Snapshot]:
    snapshot = await media.add_snapshot(
        user.user_id,
        session_key,
        filename=body.filename,
        file_path=body.file_path,
        file_size=body.file_size,
    )
    return ApiOut[Snapshot](results=snapshot)


@router.get("/snapshots")
async def list_snapshots(
    session_key: str,
    user: CurrentUser,
    media: MediaRegistry = Depends(get_media_registry),
) -> ApiOut[SnapshotListOut]:
    snapshots = await media.list_snapshots(user.user_id, session_key)
    return ApiOut[SnapshotListOut](results=SnapshotListOut(snapshots=snapshots, count=len(snapshots)))
