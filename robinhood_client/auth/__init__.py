"""Authentication flow and its session state machine."""

from robinhood_client.auth.flow import AuthenticationFlow
from robinhood_client.auth.state_machine import (
    AuthState,
    AuthStateMachine,
    InvalidTransitionError,
)

__all__ = [
    "AuthState",
    "AuthStateMachine",
    "AuthenticationFlow",
    "InvalidTransitionError",
]
