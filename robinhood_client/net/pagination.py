"""Cursor-based pagination.

List endpoints answer with a page of ``results`` plus fully-qualified
``next`` / ``previous`` URLs. PaginatedIterator walks those pages lazily,
fetching the next one through the RequestExecutor only when the current
one is used up.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Generic, TypeVar

import structlog
from pydantic import BaseModel, ConfigDict, Field

from robinhood_client.net.errors import IterationExhaustedError
from robinhood_client.net.method import ApiMethod

if TYPE_CHECKING:
    from robinhood_client.net.executor import RequestExecutor
    from robinhood_client.net.session import Session

T = TypeVar("T")

log = structlog.get_logger()


class Page(BaseModel, Generic[T]):
    """One decoded page of a list response. No ``next`` means last page."""

    model_config = ConfigDict(extra="ignore")

    results: list[T] = Field(default_factory=list)
    next: str | None = None
    previous: str | None = None

    @property
    def is_last(self) -> bool:
        return self.next is None

    def __len__(self) -> int:
        return len(self.results)


class PaginatedIterator(Generic[T]):
    """Lazy, forward-only iterator over every item of a paginated listing.

    Wraps a first page the caller already fetched. Follow-up pages are
    fetched synchronously inside ``has_next()``, with the same auth
    requirement as the descriptor that produced the first page. Not
    restartable: build a new iterator (or use PageIterable) to start over.
    """

    def __init__(
        self,
        page: Page[T],
        executor: RequestExecutor,
        session: Session,
        requires_auth: bool = False,
    ) -> None:
        self._page = page
        self._executor = executor
        self._session = session
        self._requires_auth = requires_auth
        self._position = 0
        self._exhausted = False
        self._pages_fetched = 1

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def has_next(self) -> bool:
        """Whether another item is available, fetching pages as needed.

        Raises:
            RobinhoodError: A follow-up page fetch failed. The iterator is
                unusable afterwards.
        """
        while not self._exhausted:
            if self._position < len(self._page.results):
                return True
            if self._page.next is None:
                self._exhausted = True
                log.debug("pagination_finished", pages=self._pages_fetched)
                break
            self._fetch(self._page.next)
        return False

    def _fetch(self, cursor: str) -> None:
        method = ApiMethod.get(
            cursor,
            requires_auth=self._requires_auth,
            result_shape=type(self._page),
        )
        try:
            page = self._executor.execute(method, self._session)
        except Exception:
            self._exhausted = True
            raise
        self._page = page
        self._position = 0
        self._pages_fetched += 1

    def __next__(self) -> T:
        if not self.has_next():
            raise IterationExhaustedError("No items left in paginated listing")
        item = self._page.results[self._position]
        self._position += 1
        return item

    def __iter__(self) -> Iterator[T]:
        return self


class PageIterable(Generic[T]):
    """Restartable view over a listing: each ``iter()`` starts from page one."""

    def __init__(
        self,
        page: Page[T],
        executor: RequestExecutor,
        session: Session,
        requires_auth: bool = False,
    ) -> None:
        self._page = page
        self._executor = executor
        self._session = session
        self._requires_auth = requires_auth

    def __iter__(self) -> PaginatedIterator[T]:
        return PaginatedIterator(
            self._page, self._executor, self._session, self._requires_auth
        )
