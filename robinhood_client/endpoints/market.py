"""Public market-data descriptors: quotes, fundamentals, instruments.

None of these need a token. The batch descriptors check their symbol
count when built; the remote service rejects larger batches outright.
"""

from __future__ import annotations

from collections.abc import Iterable

from robinhood_client.endpoints.types import (
    Instrument,
    InstrumentCollection,
    TickerFundamental,
    TickerQuote,
)
from robinhood_client.net.errors import RequestTooLargeError
from robinhood_client.net.method import ApiMethod
from robinhood_client.net.pagination import Page

MAX_QUOTE_BATCH = 1630
MAX_FUNDAMENTAL_BATCH = 10


def _symbols_param(symbols: Iterable[str], maximum: int) -> str:
    """Normalize a symbol batch to the comma-joined form the service takes.

    Raises:
        ValueError: If the batch is empty.
        RequestTooLargeError: If the batch exceeds ``maximum``.
    """
    batch = [s.strip().upper() for s in symbols]
    if not batch:
        raise ValueError("At least one symbol required")
    if len(batch) > maximum:
        raise RequestTooLargeError(len(batch), maximum)
    return ",".join(batch)


def get_quote(symbol: str) -> ApiMethod:
    return ApiMethod.get(
        "quotes/{symbol}/",
        params={"symbol": symbol.strip().upper()},
        result_shape=TickerQuote,
    )


def get_quote_list(symbols: Iterable[str]) -> ApiMethod:
    """Quotes for up to MAX_QUOTE_BATCH symbols; unknown ones come back null."""
    return ApiMethod.get(
        "quotes/",
        params={"symbols": _symbols_param(symbols, MAX_QUOTE_BATCH)},
        result_shape=Page[TickerQuote | None],
    )


def get_fundamental(symbol: str) -> ApiMethod:
    return ApiMethod.get(
        "fundamentals/{symbol}/",
        params={"symbol": symbol.strip().upper()},
        result_shape=TickerFundamental,
    )


def get_fundamental_list(symbols: Iterable[str]) -> ApiMethod:
    return ApiMethod.get(
        "fundamentals/",
        params={"symbols": _symbols_param(symbols, MAX_FUNDAMENTAL_BATCH)},
        result_shape=Page[TickerFundamental | None],
    )


def get_instrument_by_ticker(symbol: str) -> ApiMethod:
    return ApiMethod.get(
        "instruments/",
        params={"symbol": symbol.strip().upper()},
        result_shape=Page[Instrument],
    )


def search_instruments(keyword: str) -> ApiMethod:
    return ApiMethod.get(
        "instruments/", params={"query": keyword}, result_shape=Page[Instrument]
    )


def get_all_instruments() -> ApiMethod:
    """First page of every tracked instrument. Walk it with a PaginatedIterator."""
    return ApiMethod.get("instruments/", result_shape=Page[Instrument])


def get_collection(name: str) -> ApiMethod:
    return ApiMethod.get(
        "midlands/tags/tag/{name}/",
        params={"name": name},
        result_shape=InstrumentCollection,
    )
