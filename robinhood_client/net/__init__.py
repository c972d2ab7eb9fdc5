"""Request execution layer.

Re-exports the session, descriptor, executor, pagination and error types:
    from robinhood_client.net import ApiMethod, RequestExecutor, Session
"""

from robinhood_client.net.errors import (
    DecodeError,
    IterationExhaustedError,
    LoginError,
    NotFoundError,
    NotLoggedInError,
    RemoteRejectionError,
    RequestTooLargeError,
    RobinhoodError,
    TransportError,
    TransportTimeoutError,
)
from robinhood_client.net.executor import RequestExecutor
from robinhood_client.net.method import ApiMethod, Verb
from robinhood_client.net.pagination import Page, PageIterable, PaginatedIterator
from robinhood_client.net.session import Session
from robinhood_client.net.status import RequestStatus, StatusKind

__all__ = [
    "ApiMethod",
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
    "Session",
    "StatusKind",
    "TransportError",
    "TransportTimeoutError",
    "Verb",
]
