"""Session state machine for managing state transitions."""

from press_connect.schemas import SessionState


class SessionStateMachine:
    """State machine for stream-session lifecycle transitions.

    State flow with triggers:
    - CREATED (provisioned by create_session()) -> STARTING | ACTIVE | ENDED
    - STARTING -> ACTIVE | ENDED
    - ACTIVE (start_session()) -> ENDED
    - ENDED (end_session()) is terminal

    CREATED -> ENDED is allowed so ending a session that never went live still
    converges. Requesting the current state is handled by callers as a no-op
    and is not listed here.
    """

    TRANSITIONS: dict[SessionState, set[SessionState]] = {
        SessionState.CREATED: {
            SessionState.STARTING,
            SessionState.ACTIVE,
            SessionState.ENDED,
        },
        SessionState.STARTING: {SessionState.ACTIVE, SessionState.ENDED},
        SessionState.ACTIVE: {SessionState.ENDED},
        SessionState.ENDED: set(),
    }

    TERMINAL_STATES: set[SessionState] = {SessionState.ENDED}

    @classmethod
    def can_transition(cls, current: SessionState, new: SessionState) -> bool:
        """Check if state transition is valid.

        Args:
            current: Current session state
            new: Target state to transition to

        Returns:
            True if transition is valid, False otherwise
        """
        return new in cls.TRANSITIONS.get(current, set())

    @classmethod
    def is_terminal(cls, state: SessionState) -> bool:
        return state in cls.TERMINAL_STATES

    @classmethod
    def get_valid_transitions(cls, state: SessionState) -> set[SessionState]:
        return cls.TRANSITIONS.get(state, set())
