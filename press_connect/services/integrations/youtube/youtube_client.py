from datetime import datetime, timezone
from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from .provider import ProviderError, RemoteBroadcast, RemoteIngestStream
from .youtube_schemas import (
    BroadcastContentDetails,
    BroadcastSnippet,
    BroadcastStatus,
    GoogleErrorEnvelope,
    LiveBroadcastBody,
    LiveBroadcastResource,
    LiveStreamBody,
    LiveStreamResource,
    StreamCdn,
    StreamSnippet,
)

DEFAULT_BASE_URL = "https://www.googleapis.com/youtube/v3"


def _isoformat(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_error_response(response: httpx.Response) -> ProviderError:
    """Build a ProviderError from Google's `{"error": {...}}` envelope when present."""
    message = response.reason_phrase or "YouTube API request failed"
    reason: str | None = None
    try:
        envelope = GoogleErrorEnvelope.model_validate(response.json())
        if envelope.error.message:
            message = envelope.error.message
        if envelope.error.errors:
            reason = envelope.error.errors[0].reason
    except (ValueError, ValidationError):
        # Non-JSON body (proxies, HTML error pages)
        pass
    return ProviderError(response.status_code, message, reason)


class YoutubeLiveClient:
    """
    YouTube Data API v3 client for live broadcasts.

    Each call opens its own httpx client; the access token is passed per call
    because it belongs to the end user, not to this service.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _build_headers(self, access_token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        access_token: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        url = f"{self.base_url}/{path}"
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    headers=self._build_headers(access_token),
                )
        except httpx.TimeoutException as e:
            logger.warning("YouTube {} {} timed out: {}", method, path, e)
            raise ProviderError(0, "YouTube API request timed out", "timeout") from e
        except httpx.HTTPError as e:
            logger.warning("YouTube {} {} transport error: {}", method, path, e)
            raise ProviderError(0, "YouTube API is unreachable", "transportError") from e

        if response.is_error:
            error = parse_error_response(response)
            logger.warning(
                "YouTube {} {} failed: status={} reason={} message={}",
                method,
                path,
                error.status_code,
                error.reason,
                error.message,
            )
            raise error

        if response.status_code == 204 or not response.content:
            return None
        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(
                response.status_code, "YouTube API returned a non-JSON body", "invalidResponse"
            ) from e
        logger.debug("YouTube {} {} response: {}", method, path, data)
        return data

    async def create_broadcast(
        self,
        access_token: str,
        title: str,
        description: str,
        scheduled_start: datetime,
        visibility: str,
        auto_start: bool = True,
        auto_stop: bool = True,
    ) -> RemoteBroadcast:
        """liveBroadcasts.insert"""
        body = LiveBroadcastBody(
            snippet=BroadcastSnippet(
                title=title,
                description=description,
                scheduled_start_time=_isoformat(scheduled_start),
            ),
            status=BroadcastStatus(privacy_status=visibility, self_declared_made_for_kids=False),
            content_details=BroadcastContentDetails(
                enable_auto_start=auto_start, enable_auto_stop=auto_stop
            ),
        )
        data = await self._request(
            "POST",
            "liveBroadcasts",
            access_token,
            params={"part": "id,snippet,contentDetails,status"},
            json=body.model_dump(by_alias=True, exclude_none=True),
        )
        resource = self._validate(LiveBroadcastResource, data)
        return RemoteBroadcast(id=resource.id, title=resource.snippet.title)

    async def create_ingest_stream(
        self,
        access_token: str,
        title: str,
        ingestion_type: str = "rtmp",
        resolution: str = "720p",
        frame_rate: str = "30fps",
    ) -> RemoteIngestStream:
        """liveStreams.insert"""
        body = LiveStreamBody(
            snippet=StreamSnippet(title=title),
            cdn=StreamCdn(ingestion_type=ingestion_type, resolution=resolution, frame_rate=frame_rate),
        )
        data = await self._request(
            "POST",
            "liveStreams",
            access_token,
            params={"part": "id,snippet,cdn,status"},
            json=body.model_dump(by_alias=True, exclude_none=True),
        )
        resource = self._validate(LiveStreamResource, data)
        info = resource.cdn.ingestion_info
        if info is None:
            raise ProviderError(200, "YouTube stream has no ingestion info", "invalidResponse")
        return RemoteIngestStream(
            id=resource.id,
            ingest_url=info.ingestion_address,
            ingest_key=info.stream_name,
        )

    async def bind_broadcast(self, access_token: str, broadcast_id: str, stream_id: str) -> None:
        await self._request(
            "POST",
            "liveBroadcasts/bind",
            access_token,
            params={"part": "id", "id": broadcast_id, "streamId": stream_id},
        )

    async def transition_broadcast(
        self, access_token: str, broadcast_id: str, status: str = "complete"
    ) -> None:
        await self._request(
            "POST",
            "liveBroadcasts/transition",
            access_token,
            params={"part": "id", "id": broadcast_id, "broadcastStatus": status},
        )

    async def delete_broadcast(self, access_token: str, broadcast_id: str) -> None:
        await self._request("DELETE", "liveBroadcasts", access_token, params={"id": broadcast_id})

    async def delete_stream(self, access_token: str, stream_id: str) -> None:
        await self._request("DELETE", "liveStreams", access_token, params={"id": stream_id})

    @staticmethod
    def _validate(model, data):
        try:
            return model.model_validate(data or {})
        except ValidationError as e:
            logger.exception("Failed to validate YouTube {} response", model.__name__)
            raise ProviderError(200, "YouTube API returned an unexpected body", "invalidResponse") from e
