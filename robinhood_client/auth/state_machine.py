"""Authentication state machine -- pure transition logic with validation.

No I/O. Validates session lifecycle transitions and raises on invalid ones.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar


class AuthState(str, Enum):
    """Lifecycle of a client's session."""

    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class InvalidTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_state: AuthState, to_state: AuthState) -> None:
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(f"Invalid transition: {from_state.value} -> {to_state.value}")


class AuthStateMachine:
    """Validates from->to transitions against a static transition table.

    A failed login falls back from AUTHENTICATING to ANONYMOUS; logging in
    again from AUTHENTICATED (token refresh) is allowed.
    """

    TRANSITIONS: ClassVar[dict[AuthState, frozenset[AuthState]]] = {
        AuthState.ANONYMOUS: frozenset({AuthState.AUTHENTICATING}),
        AuthState.AUTHENTICATING: frozenset(
            {
                AuthState.AUTHENTICATED,
                AuthState.ANONYMOUS,
            }
        ),
        AuthState.AUTHENTICATED: frozenset(
            {
                AuthState.AUTHENTICATING,
                AuthState.ANONYMOUS,
            }
        ),
    }

    def __init__(self, state: AuthState = AuthState.ANONYMOUS) -> None:
        self._state = state

    @property
    def state(self) -> AuthState:
        """Current state."""
        return self._state

    def transition(self, to: AuthState) -> None:
        """Validate and apply a state transition.

        Raises:
            InvalidTransitionError: If the transition is not allowed.
        """
        if to not in self.TRANSITIONS[self._state]:
            raise InvalidTransitionError(self._state, to)
        self._state = to

    def reset(self) -> None:
        """Drop back to ANONYMOUS from any state (session cleared externally)."""
        self._state = AuthState.ANONYMOUS
