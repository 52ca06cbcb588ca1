from .session_domain import BroadcastOrchestrator
from .session_models import (
    CreateSessionParams,
    EndSessionAck,
    SessionDescriptor,
    SessionListResponse,
    SessionResponse,
)
from .session_registry import SessionRegistry
from .session_state_machine import SessionStateMachine

__all__ = [
    "BroadcastOrchestrator",
    "CreateSessionParams",
    "EndSessionAck",
    "SessionDescriptor",
    "SessionListResponse",
    "SessionRegistry",
    "SessionResponse",
    "SessionStateMachine",
]
