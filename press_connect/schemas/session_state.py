"""Stream session lifecycle states."""

from enum import Enum


class SessionState(str, Enum):
    """Session lifecycle states.

    State Transition Flow:

    CREATED -> STARTING -> ACTIVE -> ENDED
       |          |                   ^
       +----------+-------------------+

    State Descriptions:
    - CREATED: Broadcast and ingest stream provisioned and bound. Set by create_session().
    - STARTING: Encoder is connecting; reserved for callers that report it explicitly.
    - ACTIVE: Owner started the stream. Set by start_session().
    - ENDED: Owner ended the stream. Set by end_session(). Terminal.
    """

    CREATED = "created"
    STARTING = "starting"
    ACTIVE = "active"
    ENDED = "ended"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def active_states(cls) -> list["SessionState"]:
        """States considered 'active' for a session."""
        return [SessionState.CREATED, SessionState.STARTING, SessionState.ACTIVE]


class Visibility(str, Enum):
    PUBLIC = "public"
    UNLISTED = "unlisted"
    PRIVATE = "private"

    def __str__(self) -> str:
        return self.value


__all__ = ["SessionState", "Visibility"]
