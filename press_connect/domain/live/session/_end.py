"""Session ending operations."""

from loguru import logger

from press_connect.schemas import SessionState

from ._base import BaseService
from .session_models import EndSessionAck


class EndSessionOperations(BaseService):
    """Operations for ending sessions."""

    async def end_session(self, user_id: str, session_key: str) -> EndSessionAck:
        """End a stream locally, completing the YouTube broadcast when possible.

        The remote call is best-effort: a missing credential or a provider
        failure is logged and the local state still moves to ENDED. Ending an
        already ended stream makes no remote call and changes nothing.

        Args:
            user_id: Authenticated caller
            session_key: Stream to end

        Returns:
            EndSessionAck

        Raises:
            AppError: If session not found or not owned by the caller
        """
        session = await self._get_owned_session(user_id, session_key)

        if session.status == SessionState.ENDED:
            logger.info(f"Stream {session_key} already ended, nothing to do")
            return EndSessionAck(session_key=session_key)

        logger.info(f"Ending stream {session_key} (current state: {session.status})")

        credential = await self._get_valid_credential(user_id)
        if credential is None:
            logger.warning(
                f"No valid YouTube credential for user {user_id}; "
                f"ending stream {session_key} locally only"
            )
        else:
            try:
                await self.provider.transition_broadcast(
                    credential.access_token, session.remote_broadcast_id, "complete"
                )
            except Exception as e:
                logger.error(
                    f"Error completing YouTube broadcast {session.remote_broadcast_id}: {e}"
                )

        await self.update_session_state(session, SessionState.ENDED)
        return EndSessionAck(session_key=session_key)
