"""Row schemas for the Postgres tables."""

from .media import Recording, Snapshot
from .provider_credential import YOUTUBE_PROVIDER, ProviderCredential
from .session_state import SessionState, Visibility
from .stream_session import StreamSession
from .user import UserIdentity, UserRecord

__all__ = [
    "YOUTUBE_PROVIDER",
    "ProviderCredential",
    "Recording",
    "SessionState",
    "Snapshot",
    "StreamSession",
    "UserIdentity",
    "UserRecord",
    "Visibility",
]
