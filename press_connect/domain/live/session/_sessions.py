"""Session read, start and delete operations."""

from loguru import logger

from press_connect.schemas import SessionState
from press_connect.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ._base import BaseService
from .session_models import SessionListResponse, SessionResponse


class SessionOperations(BaseService):
    async def get_session(self, user_id: str, session_key: str) -> SessionResponse:
        session = await self._get_owned_session(user_id, session_key)
        return SessionResponse.from_session(session)

    async def list_sessions(self, user_id: str) -> SessionListResponse:
        """The caller's created/starting/active streams, newest first."""
        sessions = await self.registry.list_active(owner_user_id=user_id)
        return SessionListResponse(
            sessions=[SessionResponse.from_session(s) for s in sessions],
            count=len(sessions),
        )

    async def start_session(self, user_id: str, session_key: str) -> SessionResponse:
        """Mark a stream active. Local only; YouTube auto-starts on ingest."""
        session = await self._get_owned_session(user_id, session_key)
        updated = await self.update_session_state(session, SessionState.ACTIVE)
        return SessionResponse.from_session(updated)

    async def delete_session(self, user_id: str, session_key: str) -> SessionResponse:
        """Remove an ended stream and, by cascade, its recordings and snapshots."""
        session = await self._get_owned_session(user_id, session_key)
        if session.status != SessionState.ENDED:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_STATE_TRANSITION,
                errmesg=f"Only ended streams can be deleted (current state: {session.status})",
                status_code=HttpStatusCode.CONFLICT,
            )

        deleted = await self.registry.delete(session_key)
        logger.info(f"Deleted stream {session_key} for user {user_id}")
        return SessionResponse.from_session(deleted or session)
