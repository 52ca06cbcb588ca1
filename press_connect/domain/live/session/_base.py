"""Base service for session operations."""

from collections.abc import Callable
from datetime import datetime

from loguru import logger

from press_connect.app_config import AppSettings
from press_connect.domain.credentials import CredentialStore, is_valid
from press_connect.schemas import YOUTUBE_PROVIDER, ProviderCredential, SessionState, StreamSession
from press_connect.services.integrations.youtube import BroadcastProvider
from press_connect.shared.timeutil import utc_now
from press_connect.utils.app_errors import (
    AppError,
    AppErrorCode,
    HttpStatusCode,
    forbidden,
    not_found,
)

from .session_registry import SessionRegistry
from .session_state_machine import SessionStateMachine


def invalid_transition(current: SessionState, target: SessionState) -> AppError:
    return AppError(
        errcode=AppErrorCode.E_INVALID_STATE_TRANSITION,
        errmesg=f"Invalid state transition: {current} -> {target}",
        status_code=HttpStatusCode.CONFLICT,
    )


class BaseService:
    """Base service with shared session operation methods."""

    def __init__(
        self,
        credential_store: CredentialStore,
        registry: SessionRegistry,
        provider: BroadcastProvider,
        settings: AppSettings,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.credentials = credential_store
        self.registry = registry
        self.provider = provider
        self.settings = settings
        self.clock = clock

    def broadcast_url(self, broadcast_id: str) -> str:
        return f"{self.settings.YOUTUBE_WATCH_BASE_URL}?v={broadcast_id}"

    async def _get_valid_credential(self, user_id: str) -> ProviderCredential | None:
        credential = await self.credentials.get(user_id, YOUTUBE_PROVIDER)
        if not is_valid(credential, self.clock()):
            return None
        return credential

    async def _get_owned_session(self, user_id: str, session_key: str) -> StreamSession:
        """
        Load a session and check ownership.

        Raises:
            AppError(E_SESSION_NOT_FOUND): no session with that key
            AppError(E_FORBIDDEN): session belongs to someone else
        """
        session = await self.registry.get_by_key(session_key)
        if session is None:
            raise not_found(session_key)
        if not session.is_owned_by(user_id):
            logger.warning(
                "User {} denied access to stream {} owned by {}",
                user_id,
                session_key,
                session.owner_user_id,
            )
            raise forbidden()
        return session

    async def update_session_state(
        self, session: StreamSession, new_state: SessionState
    ) -> StreamSession:
        """
        Move a session to `new_state`, stamping started_at/ended_at on first entry.

        Returns the session untouched when it is already in `new_state`. The
        write is conditional on the status read here; if another request moved
        the row first, the fresh row is re-checked instead of overwritten.

        Raises:
            AppError(E_INVALID_STATE_TRANSITION): move not in the transition table
            AppError(E_SESSION_NOT_FOUND): row deleted underneath us
        """
        if session.status == new_state:
            logger.info(f"Stream {session.session_key} already in state {new_state}, skipping")
            return session

        if not SessionStateMachine.can_transition(session.status, new_state):
            raise invalid_transition(session.status, new_state)

        now = self.clock()
        started_at = now if new_state == SessionState.ACTIVE and not session.started_at else None
        ended_at = now if new_state == SessionState.ENDED and not session.ended_at else None

        updated = await self.registry.set_status(
            session.session_key,
            new_state,
            started_at=started_at,
            ended_at=ended_at,
            expected_status=session.status,
        )
        if updated is None:
            current = await self.registry.get_by_key(session.session_key)
            if current is None:
                raise not_found(session.session_key)
            logger.warning(
                f"Stream {session.session_key} moved {session.status} -> {current.status} "
                f"before {new_state} could be applied"
            )
            if current.status == new_state:
                return current
            raise invalid_transition(current.status, new_state)

        logger.info(f"Stream {session.session_key} state updated {session.status} -> {new_state}")
        return updated
