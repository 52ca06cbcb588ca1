from fastapi import APIRouter, Depends, Path

from press_connect.api.v1.dependency import CurrentUser, get_orchestrator
from press_connect.api.v1.schemas.base import ApiOut
from press_connect.api.v1.schemas.streams import CreateStreamIn
from press_connect.domain.live.session import (
    BroadcastOrchestrator,
    CreateSessionParams,
    EndSessionAck,
    SessionDescriptor,
    SessionListResponse,
    SessionResponse,
)

router = APIRouter(prefix="/streams")

SessionKey = Path(description="Stream session key")


@router.post("", status_code=201)
async def create_stream(
    body: CreateStreamIn,
    user: CurrentUser,
    orchestrator: BroadcastOrchestrator = Depends(get_orchestrator),
) -> ApiOut[SessionDescriptor]:
    """Provision a YouTube broadcast and ingest stream for the caller."""
    params = CreateSessionParams(
        title=body.title,
        description=body.description,
        visibility=body.visibility,
    )
    result = await orchestrator.create_session(user.user_id, params)
    return ApiOut[SessionDescriptor](results=result)


@router.get("")
async def list_streams(
    user: CurrentUser,
    orchestrator: BroadcastOrchestrator = Depends(get_orchestrator),
) -> ApiOut[SessionListResponse]:
    """List the caller's active streams, newest first."""
    return ApiOut[SessionListResponse](results=await orchestrator.list_sessions(user.user_id))


@router.get("/{session_key}")
async def get_stream(
    user: CurrentUser,
    session_key: str = SessionKey,
    orchestrator: BroadcastOrchestrator = Depends(get_orchestrator),
) -> ApiOut[SessionResponse]:
    result = await orchestrator.get_session(user.user_id, session_key)
    return ApiOut[SessionResponse](results=result)


@router.patch("/{session_key}/start")
async def start_stream(
    user: CurrentUser,
    session_key: str = SessionKey,
    orchestrator: BroadcastOrchestrator = Depends(get_orchestrator),
) -> ApiOut[SessionResponse]:
    result = await orchestrator.start_session(user.user_id, session_key)
    return ApiOut[SessionResponse](results=result)


@router.post("/{session_key}/end")
async def end_stream(
    user: CurrentUser,
    session_key: str = SessionKey,
    orchestrator: BroadcastOrchestrator = Depends(get_orchestrator),
) -> ApiOut[EndSessionAck]:
    """End a stream. Succeeds even if YouTube cannot be reached."""
    result = await orchestrator.end_session(user.user_id, session_key)
    return ApiOut[EndSessionAck](results=result)


@router.delete("/{session_key}")
async def delete_stream(
    user: CurrentUser,
    session_key: str = SessionKey,
    orchestrator: BroadcastOrchestrator = Depends(get_orchestrator),
) -> ApiOut[SessionResponse]:
    result = await orchestrator.delete_session(user.user_id, session_key)
    return ApiOut[SessionResponse](results=result)
