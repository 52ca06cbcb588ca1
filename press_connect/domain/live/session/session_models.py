"""Session domain models."""

from datetime import datetime

from pydantic import BaseModel

from press_connect.schemas import SessionState, StreamSession, Visibility


class CreateSessionParams(BaseModel):
    """Caller-supplied broadcast descriptor; blanks fall back to defaults."""

    title: str | None = None
    description: str | None = None
    visibility: Visibility = Visibility.PUBLIC


class SessionDescriptor(BaseModel):
    """Returned once, on creation. Carries the ingest secret."""

    session_id: str
    broadcast_id: str
    stream_id: str
    ingest_url: str
    ingest_key: str
    broadcast_url: str


class SessionResponse(BaseModel):
    """Session response model."""

    session_key: str
    owner_user_id: str

    broadcast_id: str
    stream_id: str
    ingest_url: str
    ingest_key: str

    title: str
    description: str | None = None
    visibility: str

    status: SessionState

    # Timestamps
    created_at: datetime
    updated_at: datetime
    started_at: datetime | None = None
    ended_at: datetime | None = None

    @classmethod
    def from_session(cls, session: StreamSession) -> "SessionResponse":
        return cls(
            session_key=session.session_key,
            owner_user_id=session.owner_user_id,
            broadcast_id=session.remote_broadcast_id,
            stream_id=session.remote_stream_id,
            ingest_url=session.ingest_url,
            ingest_key=session.ingest_key,
            title=session.title,
            description=session.description,
            visibility=session.visibility,
            status=session.status,
            created_at=session.created_at,
            updated_at=session.updated_at,
            started_at=session.started_at,
            ended_at=session.ended_at,
        )


class SessionListResponse(BaseModel):
    sessions: list[SessionResponse]
    count: int


class EndSessionAck(BaseModel):
    message: str = "Stream ended successfully"
    session_key: str
    status: SessionState = SessionState.ENDED
