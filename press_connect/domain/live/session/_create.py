"""Session creation: provision the remote broadcast, then persist locally."""

from datetime import datetime, timezone

from loguru import logger

from press_connect.schemas import StreamSession
from press_connect.services.integrations.youtube import (
    ProviderError,
    RemoteBroadcast,
    RemoteIngestStream,
    reauth_required,
    translate_provider_error,
)

from ._base import BaseService
from .session_models import CreateSessionParams, SessionDescriptor

DEFAULT_DESCRIPTION = "Live stream from Press Connect mobile app"


def default_title(now: datetime) -> str:
    stamp = now.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return f"Live Stream - {stamp.replace('+00:00', 'Z')}"


class CreateSessionOperations(BaseService):
    """
    Creation runs as a saga against the provider:

    1. create broadcast
    2. create ingest stream
    3. bind stream to broadcast
    4. persist the session row

    A failure after step 1 deletes whatever remote resources exist before the
    error is re-raised. No database connection is held during steps 1-3.
    """

    async def create_session(self, user_id: str, params: CreateSessionParams) -> SessionDescriptor:
        credential = await self._get_valid_credential(user_id)
        if credential is None:
            logger.info("User {} has no valid YouTube credential, refusing to create stream", user_id)
            raise reauth_required()

        access_token = credential.access_token
        now = self.clock()
        title = params.title or default_title(now)
        description = params.description or DEFAULT_DESCRIPTION
        visibility = params.visibility.value

        try:
            broadcast = await self.provider.create_broadcast(
                access_token,
                title=title,
                description=description,
                scheduled_start=now,
                visibility=visibility,
                auto_start=True,
                auto_stop=True,
            )
        except ProviderError as e:
            logger.error("Failed to create YouTube broadcast for user {}: {}", user_id, e)
            raise translate_provider_error(e) from e

        stream: RemoteIngestStream | None = None
        try:
            stream = await self.provider.create_ingest_stream(
                access_token,
                title=f"Stream for {broadcast.title}",
                ingestion_type="rtmp",
                resolution="720p",
                frame_rate="30fps",
            )
            await self.provider.bind_broadcast(access_token, broadcast.id, stream.id)
            session = await self._persist(user_id, broadcast, stream, description, visibility)
        except Exception as e:
            logger.error(
                "Stream creation failed after broadcast {} was created: {}: {}",
                broadcast.id,
                type(e).__name__,
                e,
            )
            await self._compensate(access_token, broadcast.id, stream.id if stream else None)
            if isinstance(e, ProviderError):
                raise translate_provider_error(e) from e
            raise

        logger.info(
            "Created stream {} for user {} (broadcast={}, stream={})",
            session.session_key,
            user_id,
            broadcast.id,
            stream.id,
        )
        return SessionDescriptor(
            session_id=session.session_key,
            broadcast_id=broadcast.id,
            stream_id=stream.id,
            ingest_url=stream.ingest_url,
            ingest_key=stream.ingest_key,
            broadcast_url=self.broadcast_url(broadcast.id),
        )

    async def _persist(
        self,
        user_id: str,
        broadcast: RemoteBroadcast,
        stream: RemoteIngestStream,
        description: str,
        visibility: str,
    ) -> StreamSession:
        return await self.registry.create(
            owner_user_id=user_id,
            remote_broadcast_id=broadcast.id,
            remote_stream_id=stream.id,
            ingest_key=stream.ingest_key,
            ingest_url=stream.ingest_url,
            title=broadcast.title,
            description=description,
            visibility=visibility,
        )

    async def _compensate(self, access_token: str, broadcast_id: str, stream_id: str | None) -> None:
        """Best-effort removal of remote resources; failures are logged only."""
        if stream_id is not None:
            try:
                await self.provider.delete_stream(access_token, stream_id)
                logger.info("Compensation: deleted YouTube stream {}", stream_id)
            except Exception as e:
                logger.error("Compensation failed to delete YouTube stream {}: {}", stream_id, e)

        try:
            await self.provider.delete_broadcast(access_token, broadcast_id)
            logger.info("Compensation: deleted YouTube broadcast {}", broadcast_id)
        except Exception as e:
            logger.error("Compensation failed to delete YouTube broadcast {}: {}", broadcast_id, e)
