"""Client error hierarchy.

All classified failures inherit from RobinhoodError, enabling
clean exception handling at the client boundary.
"""

from __future__ import annotations


class RobinhoodError(Exception):
    """Base exception for all classified client errors."""


class TransportError(RobinhoodError):
    """DNS failure, refused connection, or broken exchange. Never retried."""


class TransportTimeoutError(TransportError):
    """Connect or read timeout while talking to the remote service."""


class RemoteRejectionError(RobinhoodError):
    """HTTP status >= 400 from the remote service.

    Stores the HTTP status code and the server's error message, if any.
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Remote rejected request with {status_code}: {message}")


class DecodeError(RobinhoodError):
    """Response body did not match the declared result shape."""


class NotLoggedInError(RobinhoodError):
    """Operation requires an auth token but the session has none."""


class NotFoundError(RobinhoodError):
    """Requested symbol or instrument does not exist on the remote service."""


class RequestTooLargeError(RobinhoodError):
    """Batch descriptor built with more items than the service accepts."""

    def __init__(self, size: int, maximum: int) -> None:
        self.size = size
        self.maximum = maximum
        super().__init__(f"Request holds {size} items, maximum is {maximum}")


class IterationExhaustedError(RobinhoodError, StopIteration):
    """next() called on a paginated iterator with nothing left.

    Also a StopIteration so ``for`` loops over an iterator end normally.
    """


class LoginError(RobinhoodError):
    """Credentials supplied at client construction could not be exchanged."""
