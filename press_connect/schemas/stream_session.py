"""Stream session row schema."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from .session_state import SessionState


class StreamSession(BaseModel):
    """One provisioned broadcast + ingest pair and its lifecycle status."""

    session_key: str
    owner_user_id: str

    # Remote resources
    remote_broadcast_id: str
    remote_stream_id: str
    ingest_key: str
    ingest_url: str

    # Descriptor fields
    title: str
    description: str | None = None
    visibility: str = "public"

    status: SessionState = SessionState.CREATED

    # Timestamps
    created_at: datetime
    updated_at: datetime
    started_at: datetime | None = None
    ended_at: datetime | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "StreamSession":
        return cls.model_validate(dict(record))

    def is_owned_by(self, user_id: str) -> bool:
        return self.owner_user_id == user_id
