"""Client for Robinhood's unofficial JSON/REST service.

Re-exports the public surface for convenient imports:
    from robinhood_client import RobinhoodApi, ClientConfig, RobinhoodError
"""

from robinhood_client.api import RobinhoodApi
from robinhood_client.auth import AuthenticationFlow, AuthState
from robinhood_client.config import ClientConfig
from robinhood_client.net import (
    ApiMethod,
    DecodeError,
    IterationExhaustedError,
    LoginError,
    NotFoundError,
    NotLoggedInError,
    Page,
    PageIterable,
    PaginatedIterator,
    RemoteRejectionError,
    RequestExecutor,
    RequestStatus,
    RequestTooLargeError,
    RobinhoodError,
    Session,
    StatusKind,
    TransportError,
    TransportTimeoutError,
    Verb,
)

__all__ = [
    "ApiMethod",
    "AuthState",
    "AuthenticationFlow",
    "ClientConfig",
    "DecodeError",
    "IterationExhaustedError",
    "LoginError",
    "NotFoundError",
    "NotLoggedInError",
    "Page",
    "PageIterable",
    "PaginatedIterator",
    "RemoteRejectionError",
    "RequestExecutor",
    "RequestStatus",
    "RequestTooLargeError",
    "RobinhoodError",
    "RobinhoodApi",
    "Session",
    "StatusKind",
    "TransportError",
    "TransportTimeoutError",
    "Verb",
]
