"""Broadcast orchestrator facade over the split session operations."""

from collections.abc import Callable
from datetime import datetime

from press_connect.app_config import AppSettings
from press_connect.domain.credentials import CredentialStore
from press_connect.services.integrations.youtube import BroadcastProvider
from press_connect.shared.timeutil import utc_now

from ._create import CreateSessionOperations
from ._end import EndSessionOperations
from ._sessions import SessionOperations
from .session_models import (
    CreateSessionParams,
    EndSessionAck,
    SessionDescriptor,
    SessionListResponse,
    SessionResponse,
)
from .session_registry import SessionRegistry


class BroadcastOrchestrator:
    """Drives the stream-session lifecycle against the provider and the registry."""

    def __init__(
        self,
        credential_store: CredentialStore,
        registry: SessionRegistry,
        provider: BroadcastProvider,
        settings: AppSettings,
        clock: Callable[[], datetime] = utc_now,
    ):
        deps = (credential_store, registry, provider, settings, clock)
        self._create = CreateSessionOperations(*deps)
        self._sessions = SessionOperations(*deps)
        self._end = EndSessionOperations(*deps)

    # ==================== LIFECYCLE ====================

    async def create_session(
        self,
        user_id: str,
        params: CreateSessionParams,
    ) -> SessionDescriptor:
        """Provision a broadcast + ingest stream and record it.

        Raises AppError E_PROVIDER_REAUTH_REQUIRED before any remote call when
        the user has no valid YouTube credential.
        """
        return await self._create.create_session(user_id=user_id, params=params)

    async def start_session(self, user_id: str, session_key: str) -> SessionResponse:
        return await self._sessions.start_session(user_id=user_id, session_key=session_key)

    async def end_session(self, user_id: str, session_key: str) -> EndSessionAck:
        """End a session. Idempotent: a second call is a no-op."""
        return await self._end.end_session(user_id=user_id, session_key=session_key)

    # ==================== READS ====================

    async def get_session(self, user_id: str, session_key: str) -> SessionResponse:
        return await self._sessions.get_session(user_id=user_id, session_key=session_key)

    async def list_sessions(self, user_id: str) -> SessionListResponse:
        return await self._sessions.list_sessions(user_id=user_id)

    async def delete_session(self, user_id: str, session_key: str) -> SessionResponse:
        """Delete an ended session owned by the caller."""
        return await self._sessions.delete_session(user_id=user_id, session_key=session_key)
