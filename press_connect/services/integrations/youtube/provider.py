"""Broadcast provider capability interface."""

from datetime import datetime
from typing import Protocol

from pydantic import BaseModel


class ProviderError(Exception):
    """A failed call to the remote broadcast platform.

    `status_code` is the HTTP status returned by the provider (0 when the
    request never got a response), `reason` the provider's machine-readable
    error reason when it sent one.
    """

    def __init__(self, status_code: int, message: str, reason: str | None = None):
        self.status_code = status_code
        self.message = message
        self.reason = reason
        super().__init__(f"{status_code} {reason or ''} {message}".strip())


class RemoteBroadcast(BaseModel):
    id: str
    title: str


class RemoteIngestStream(BaseModel):
    id: str
    ingest_url: str
    ingest_key: str


class BroadcastProvider(Protocol):
    async def create_broadcast(
        self,
        access_token: str,
        title: str,
        description: str,
        scheduled_start: datetime,
        visibility: str,
        auto_start: bool = True,
        auto_stop: bool = True,
    ) -> RemoteBroadcast: ...

    async def create_ingest_stream(
        self,
        access_token: str,
        title: str,
        ingestion_type: str = "rtmp",
        resolution: str = "720p",
        frame_rate: str = "30fps",
    ) -> RemoteIngestStream: ...

    async def bind_broadcast(self, access_token: str, broadcast_id: str, stream_id: str) -> None: ...

    async def transition_broadcast(
        self, access_token: str, broadcast_id: str, status: str = "complete"
    ) -> None: ...

    async def delete_broadcast(self, access_token: str, broadcast_id: str) -> None: ...

    async def delete_stream(self, access_token: str, stream_id: str) -> None: ...
