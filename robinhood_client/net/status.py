"""RequestStatus — immutable outcome of an authentication operation."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class StatusKind(str, Enum):
    """Tri-state outcome of login/logout."""

    SUCCESS = "success"
    FAILURE = "failure"
    NOT_LOGGED_IN = "not_logged_in"


@dataclass(frozen=True)
class RequestStatus:
    """Outcome plus an optional diagnostic message.

    Constructed fresh per operation. ``with_message`` returns a copy.
    """

    kind: StatusKind
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.kind is StatusKind.SUCCESS

    def with_message(self, message: str) -> RequestStatus:
        return replace(self, message=message)


def success() -> RequestStatus:
    return RequestStatus(StatusKind.SUCCESS)


def failure(message: str | None = None) -> RequestStatus:
    return RequestStatus(StatusKind.FAILURE, message)


def not_logged_in() -> RequestStatus:
    return RequestStatus(StatusKind.NOT_LOGGED_IN)
