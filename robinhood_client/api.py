"""RobinhoodApi — one method per remote operation.

Each instance owns its own config, executor, session and authentication
flow; nothing is shared between instances. Listing methods walk every
page before returning.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from typing import Any, Self, TypeVar
from urllib.parse import urljoin

import httpx
import structlog

from robinhood_client.auth import AuthenticationFlow, AuthState
from robinhood_client.config import ClientConfig
from robinhood_client.endpoints import account, market, orders
from robinhood_client.endpoints.orders import OrderRequest
from robinhood_client.endpoints.types import (
    Account,
    AccountHolderAffiliation,
    AccountHolderEmployment,
    AccountHolderInfo,
    BasicUserInfo,
    Instrument,
    InstrumentCollection,
    InvestmentProfile,
    OptionPosition,
    OrderSide,
    OrderTrigger,
    OrderType,
    Position,
    SecurityOrder,
    TickerFundamental,
    TickerQuote,
    TimeInForce,
)
from robinhood_client.net.errors import (
    LoginError,
    NotFoundError,
    NotLoggedInError,
    RemoteRejectionError,
)
from robinhood_client.net.executor import RequestExecutor
from robinhood_client.net.method import ApiMethod
from robinhood_client.net.pagination import Page, PageIterable, PaginatedIterator
from robinhood_client.net.session import Session
from robinhood_client.net.status import RequestStatus, StatusKind

T = TypeVar("T")

log = structlog.get_logger()


class RobinhoodApi:
    """Intermediary between the remote service and the calling application.

    Construct without credentials for public market data only, or with
    ``username``/``password`` to log in immediately (raises LoginError on
    failure). ``transport`` is handed to httpx, mainly for tests.
    """

    def __init__(
        self,
        username: str | None = None,
        password: str | None = None,
        *,
        config: ClientConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config or ClientConfig()
        self._executor = RequestExecutor(self._config, transport=transport)
        self._session = Session()
        self._auth = AuthenticationFlow(self._executor, self._session)

        if username is not None and password is not None:
            result = self.login(username, password)
            if result.kind is StatusKind.FAILURE:
                self._executor.close()
                raise LoginError(f"Failed to log user in: {result.message}")

    # --- Session ---

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def session(self) -> Session:
        return self._session

    @property
    def auth_state(self) -> AuthState:
        return self._auth.state

    def is_logged_in(self) -> bool:
        return self._session.has_token()

    def auth_token(self) -> str | None:
        return self._session.token

    def set_auth_token(self, token: str) -> None:
        """Inject a token obtained elsewhere. Prefer ``login``."""
        self._auth.use_token(token)

    def login(self, username: str, password: str) -> RequestStatus:
        return self._auth.login(username, password)

    def logout(self) -> RequestStatus:
        return self._auth.logout()

    # --- Plumbing ---

    def execute(self, method: ApiMethod) -> Any:
        """Run any descriptor with this instance's session."""
        return self._executor.execute(method, self._session)

    def iterate(self, page: Page[T], requires_auth: bool = False) -> PaginatedIterator[T]:
        return PaginatedIterator(page, self._executor, self._session, requires_auth)

    def build_iterable(self, page: Page[T], requires_auth: bool = False) -> PageIterable[T]:
        """Restartable iterable over a listing, starting at ``page``."""
        return PageIterable(page, self._executor, self._session, requires_auth)

    def _collect(self, method: ApiMethod) -> list[Any]:
        page: Page[Any] = self.execute(method)
        return list(self.iterate(page, method.requires_auth))

    def _require_account_number(self) -> str:
        if self._session.account_id is None:
            raise NotLoggedInError("No account number bound. Call login() first.")
        return self._session.account_id

    # --- Account data ---

    def get_account_data(self) -> Account:
        page: Page[Account] = self.execute(account.get_accounts())
        if not page.results:
            raise NotFoundError("No account returned for this login")
        return page.results[0]

    def get_basic_user_info(self) -> BasicUserInfo:
        return self.execute(account.get_basic_user_info())

    def get_account_holder_info(self) -> AccountHolderInfo:
        return self.execute(account.get_account_holder_info())

    def get_account_holder_employment(self) -> AccountHolderEmployment:
        return self.execute(account.get_account_holder_employment())

    def get_account_holder_affiliation(self) -> AccountHolderAffiliation:
        return self.execute(account.get_account_holder_affiliation())

    def get_account_investment_profile(self) -> InvestmentProfile:
        return self.execute(account.get_investment_profile())

    def get_account_watchlist(self) -> list[Position]:
        """Every instrument the account has touched, including zero quantity."""
        return self._collect(account.get_positions(self._require_account_number()))

    def get_account_positions(self) -> list[Position]:
        """Watchlist entries the account actually holds shares in."""
        return [p for p in self.get_account_watchlist() if p.quantity >= 1]

    # --- Orders ---

    def get_orders(self) -> list[SecurityOrder]:
        return self._collect(orders.get_orders())

    def place_order(self, order: OrderRequest) -> SecurityOrder:
        """Submit an order. Resolves the instrument first; never retried."""
        account_number = self._require_account_number()
        instrument = self.get_instrument_by_ticker(order.symbol)
        if instrument.url is None:
            raise NotFoundError(f"Instrument {order.symbol} has no URL")
        account_url = urljoin(self._config.base_url, f"accounts/{account_number}/")
        log.info(
            "order_submitting",
            symbol=order.symbol,
            side=order.side.value,
            quantity=order.quantity,
            order_type=order.order_type.value,
            trigger=order.trigger.value,
        )
        return self.execute(orders.place_order(order, account_url, instrument.url))

    def make_market_order(
        self,
        ticker: str,
        quantity: int,
        side: OrderSide,
        time_in_force: TimeInForce = TimeInForce.GFD,
    ) -> SecurityOrder:
        return self.place_order(
            OrderRequest(ticker, side, quantity, OrderType.MARKET, time_in_force)
        )

    def make_market_stop_order(
        self,
        ticker: str,
        quantity: int,
        side: OrderSide,
        stop_price: Decimal,
        time_in_force: TimeInForce = TimeInForce.GFD,
    ) -> SecurityOrder:
        return self.place_order(
            OrderRequest(
                ticker,
                side,
                quantity,
                OrderType.MARKET,
                time_in_force,
                trigger=OrderTrigger.STOP,
                stop_price=stop_price,
            )
        )

    def make_limit_order(
        self,
        ticker: str,
        quantity: int,
        side: OrderSide,
        limit_price: Decimal,
        time_in_force: TimeInForce = TimeInForce.GFD,
    ) -> SecurityOrder:
        return self.place_order(
            OrderRequest(
                ticker,
                side,
                quantity,
                OrderType.LIMIT,
                time_in_force,
                limit_price=limit_price,
            )
        )

    def make_limit_stop_order(
        self,
        ticker: str,
        quantity: int,
        side: OrderSide,
        limit_price: Decimal,
        stop_price: Decimal,
        time_in_force: TimeInForce = TimeInForce.GFD,
    ) -> SecurityOrder:
        return self.place_order(
            OrderRequest(
                ticker,
                side,
                quantity,
                OrderType.LIMIT,
                time_in_force,
                trigger=OrderTrigger.STOP,
                limit_price=limit_price,
                stop_price=stop_price,
            )
        )

    def cancel_order(self, order: SecurityOrder) -> None:
        """Cancel an open order."""
        self.execute(orders.cancel_order(order.id))

    def get_options(self) -> list[OptionPosition]:
        return self._collect(orders.get_option_positions())

    # --- Public market data ---

    def get_fundamental(self, ticker: str) -> TickerFundamental:
        """Raises NotFoundError for an unknown ticker."""
        try:
            return self.execute(market.get_fundamental(ticker))
        except RemoteRejectionError as e:
            if e.status_code == 404:
                raise NotFoundError(f"Ticker not found: {ticker}") from e
            raise

    def get_fundamental_list(self, tickers: Iterable[str]) -> list[TickerFundamental | None]:
        """Raises RequestTooLargeError above MAX_FUNDAMENTAL_BATCH tickers."""
        return self._collect(market.get_fundamental_list(tickers))

    def get_quote_by_ticker(self, ticker: str) -> TickerQuote:
        """Raises NotFoundError for an unknown ticker."""
        try:
            return self.execute(market.get_quote(ticker))
        except RemoteRejectionError as e:
            if e.status_code == 404:
                raise NotFoundError(f"Ticker not found: {ticker}") from e
            raise

    def get_quote_list_by_tickers(self, tickers: Iterable[str]) -> list[TickerQuote | None]:
        """Quotes in request order; None where a ticker is unknown.

        Raises RequestTooLargeError above MAX_QUOTE_BATCH tickers.
        """
        page: Page[TickerQuote | None] = self.execute(market.get_quote_list(tickers))
        return list(page.results)

    def get_instrument_by_ticker(self, ticker: str) -> Instrument:
        page: Page[Instrument] = self.execute(market.get_instrument_by_ticker(ticker))
        if not page.results:
            raise NotFoundError(f"Ticker not found: {ticker}")
        return page.results[0]

    def get_instruments_by_keyword(self, keyword: str) -> list[Instrument]:
        page: Page[Instrument] = self.execute(market.search_instruments(keyword))
        return list(page.results)

    def get_all_instruments(self) -> list[Instrument]:
        """Every tracked instrument. Many requests; use sparingly."""
        return self._collect(market.get_all_instruments())

    def get_collection_data(self, collection_name: str) -> InstrumentCollection:
        return self.execute(market.get_collection(collection_name))

    # --- Lifecycle ---

    def close(self) -> None:
        self._executor.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        self.close()
