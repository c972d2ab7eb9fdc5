"""Tests for the RobinhoodApi facade against FakeRobinhood."""

from __future__ import annotations

from decimal import Decimal
from urllib.parse import parse_qs

import httpx
import pytest

from robinhood_client.api import RobinhoodApi
from robinhood_client.auth import AuthState
from robinhood_client.config import ClientConfig
from robinhood_client.endpoints import market
from robinhood_client.endpoints.types import OrderSide, SecurityOrder, TimeInForce
from robinhood_client.fake import FakeRobinhood
from robinhood_client.net.errors import (
    LoginError,
    NotFoundError,
    NotLoggedInError,
    RemoteRejectionError,
    RequestTooLargeError,
    TransportTimeoutError,
)
from robinhood_client.net.status import StatusKind
from tests.factories import ACCOUNT_NUMBER, BASE_URL, PASSWORD, USERNAME, make_account


def _order_form(fake: FakeRobinhood) -> dict[str, str]:
    request = [r for r in fake.requests_to("/orders/") if r.method == "POST"][-1]
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


class TestConstruction:
    def test_anonymous_instance(self, api: RobinhoodApi) -> None:
        assert api.is_logged_in() is False
        assert api.auth_token() is None
        assert api.auth_state is AuthState.ANONYMOUS

    def test_credentials_log_in(self, logged_in_api: RobinhoodApi, fake: FakeRobinhood) -> None:
        assert logged_in_api.is_logged_in() is True
        assert logged_in_api.auth_token() in fake.tokens
        assert logged_in_api.session.account_id == ACCOUNT_NUMBER
        assert logged_in_api.auth_state is AuthState.AUTHENTICATED

    def test_bad_credentials_raise_login_error(
        self, config: ClientConfig, fake: FakeRobinhood
    ) -> None:
        with pytest.raises(LoginError, match="Failed to log user in"):
            RobinhoodApi(USERNAME, "wrong", config=config, transport=fake.transport)

    def test_missing_account_number_raises_login_error(
        self, config: ClientConfig, fake: FakeRobinhood
    ) -> None:
        fake.account = make_account(account_number=None)
        with pytest.raises(LoginError, match="Failed to get account number"):
            RobinhoodApi(USERNAME, PASSWORD, config=config, transport=fake.transport)

    def test_instances_do_not_share_sessions(
        self, api: RobinhoodApi, logged_in_api: RobinhoodApi
    ) -> None:
        assert logged_in_api.is_logged_in() is True
        assert api.is_logged_in() is False

    def test_default_config_when_none_given(self, fake: FakeRobinhood) -> None:
        with RobinhoodApi(transport=fake.transport) as client:
            assert client.config.token_type == "Bearer"


class TestSession:
    def test_login_then_logout(self, api: RobinhoodApi, fake: FakeRobinhood) -> None:
        assert api.login(USERNAME, PASSWORD).kind is StatusKind.SUCCESS
        token = api.auth_token()

        assert api.logout().kind is StatusKind.SUCCESS
        assert api.is_logged_in() is False
        assert token not in fake.tokens
        assert api.auth_state is AuthState.ANONYMOUS

    def test_logout_when_anonymous(self, api: RobinhoodApi) -> None:
        assert api.logout().kind is StatusKind.NOT_LOGGED_IN

    def test_login_failure_status(self, api: RobinhoodApi) -> None:
        assert api.login(USERNAME, "wrong").kind is StatusKind.FAILURE

    def test_injected_token_is_used(self, api: RobinhoodApi, fake: FakeRobinhood) -> None:
        api.set_auth_token(fake.issue_token())
        assert api.is_logged_in() is True
        assert len(api.get_orders()) == 2

    def test_injected_token_replaces_bound_account(
        self, logged_in_api: RobinhoodApi, fake: FakeRobinhood
    ) -> None:
        logged_in_api.set_auth_token(fake.issue_token())
        assert logged_in_api.auth_state is AuthState.ANONYMOUS
        with pytest.raises(NotLoggedInError):
            logged_in_api.get_account_watchlist()


class TestAccountData:
    def test_requires_login(self, api: RobinhoodApi, fake: FakeRobinhood) -> None:
        with pytest.raises(NotLoggedInError):
            api.get_account_data()
        assert fake.requests == []

    def test_account_data(self, logged_in_api: RobinhoodApi) -> None:
        acct = logged_in_api.get_account_data()
        assert acct.account_number == ACCOUNT_NUMBER
        assert acct.cash == Decimal("1500.0000")

    def test_basic_user_info(self, logged_in_api: RobinhoodApi) -> None:
        assert logged_in_api.get_basic_user_info().username == USERNAME

    def test_account_holder_info(self, logged_in_api: RobinhoodApi) -> None:
        assert logged_in_api.get_account_holder_info().city == "Menlo Park"

    def test_employment(self, logged_in_api: RobinhoodApi) -> None:
        assert logged_in_api.get_account_holder_employment().occupation == "Engineer"

    def test_investment_profile(self, logged_in_api: RobinhoodApi) -> None:
        profile = logged_in_api.get_account_investment_profile()
        assert profile.risk_tolerance == "med_risk_tolerance"

    def test_account_holder_affiliation(
        self, logged_in_api: RobinhoodApi, fake: FakeRobinhood
    ) -> None:
        affiliation = logged_in_api.get_account_holder_affiliation()
        assert affiliation.control_person is False
        assert affiliation.stock_loan_consent_status == "consented"
        assert affiliation.security_affiliated_firm_name is None
        assert fake.requests[-1].url.path == "/user/additional_info/"

    def test_affiliation_requires_login(self, api: RobinhoodApi, fake: FakeRobinhood) -> None:
        with pytest.raises(NotLoggedInError):
            api.get_account_holder_affiliation()
        assert fake.requests == []

    def test_watchlist_walks_all_pages(
        self, logged_in_api: RobinhoodApi, fake: FakeRobinhood
    ) -> None:
        watchlist = logged_in_api.get_account_watchlist()
        assert len(watchlist) == 3
        assert len(fake.requests_to(f"/accounts/{ACCOUNT_NUMBER}/positions/")) == 2

    def test_positions_drop_zero_quantity(self, logged_in_api: RobinhoodApi) -> None:
        positions = logged_in_api.get_account_positions()
        assert [p.quantity for p in positions] == [Decimal("10"), Decimal("2")]

    def test_watchlist_needs_bound_account(
        self, api: RobinhoodApi, fake: FakeRobinhood
    ) -> None:
        api.set_auth_token(fake.issue_token())
        with pytest.raises(NotLoggedInError):
            api.get_account_watchlist()


class TestOrders:
    def test_get_orders(self, logged_in_api: RobinhoodApi) -> None:
        assert [o.id for o in logged_in_api.get_orders()] == ["order-1", "order-2"]

    def test_market_order(self, logged_in_api: RobinhoodApi, fake: FakeRobinhood) -> None:
        order = logged_in_api.make_market_order("aapl", 5, OrderSide.BUY)

        assert isinstance(order, SecurityOrder)
        assert order.state == "queued"
        assert order.is_cancelable
        form = _order_form(fake)
        assert form["account"] == f"{BASE_URL}accounts/{ACCOUNT_NUMBER}/"
        assert form["instrument"] == f"{BASE_URL}instruments/aapl-id/"
        assert form["symbol"] == "AAPL"
        assert form["quantity"] == "5"
        assert form["type"] == "market"
        assert "price" not in form

    def test_limit_order(self, logged_in_api: RobinhoodApi, fake: FakeRobinhood) -> None:
        order = logged_in_api.make_limit_order(
            "MSFT", 3, OrderSide.SELL, Decimal("410.25"), TimeInForce.GTC
        )
        assert order.price == Decimal("410.25")
        form = _order_form(fake)
        assert form["type"] == "limit"
        assert form["time_in_force"] == "gtc"
        assert form["trigger"] == "immediate"

    def test_market_stop_order(self, logged_in_api: RobinhoodApi, fake: FakeRobinhood) -> None:
        logged_in_api.make_market_stop_order("TSLA", 1, OrderSide.SELL, Decimal("200.00"))
        form = _order_form(fake)
        assert form["trigger"] == "stop"
        assert form["stop_price"] == "200.00"
        assert "price" not in form

    def test_limit_stop_order(self, logged_in_api: RobinhoodApi, fake: FakeRobinhood) -> None:
        logged_in_api.make_limit_stop_order(
            "TSLA", 1, OrderSide.SELL, Decimal("199.00"), Decimal("200.00")
        )
        form = _order_form(fake)
        assert form["price"] == "199.00"
        assert form["stop_price"] == "200.00"

    def test_order_sent_once(self, logged_in_api: RobinhoodApi, fake: FakeRobinhood) -> None:
        fake.fail_with("POST", "/orders/", httpx.ReadTimeout("read timed out"))
        with pytest.raises(TransportTimeoutError):
            logged_in_api.make_market_order("AAPL", 1, OrderSide.BUY)
        posts = [r for r in fake.requests_to("/orders/") if r.method == "POST"]
        assert len(posts) == 1

    def test_unknown_ticker_not_submitted(
        self, logged_in_api: RobinhoodApi, fake: FakeRobinhood
    ) -> None:
        with pytest.raises(NotFoundError):
            logged_in_api.make_market_order("ZZZZ", 1, OrderSide.BUY)
        assert not [r for r in fake.requests_to("/orders/") if r.method == "POST"]

    def test_order_requires_login(self, api: RobinhoodApi, fake: FakeRobinhood) -> None:
        with pytest.raises(NotLoggedInError):
            api.make_market_order("AAPL", 1, OrderSide.BUY)
        assert fake.requests == []

    def test_invalid_quantity_rejected_locally(
        self, logged_in_api: RobinhoodApi, fake: FakeRobinhood
    ) -> None:
        before = len(fake.requests)
        with pytest.raises(ValueError):
            logged_in_api.make_market_order("AAPL", 0, OrderSide.BUY)
        assert len(fake.requests) == before

    def test_cancel_order(self, logged_in_api: RobinhoodApi, fake: FakeRobinhood) -> None:
        order = logged_in_api.make_market_order("AAPL", 1, OrderSide.BUY)

        logged_in_api.cancel_order(order)

        assert fake.orders[0]["state"] == "cancelled"
        refreshed = logged_in_api.get_orders()[0]
        assert refreshed.id == order.id
        assert refreshed.is_cancelable is False

    def test_cancel_closed_order_rejected(
        self, logged_in_api: RobinhoodApi
    ) -> None:
        filled = logged_in_api.get_orders()[0]
        with pytest.raises(RemoteRejectionError) as exc_info:
            logged_in_api.cancel_order(filled)
        assert exc_info.value.status_code == 404

    def test_options(self, logged_in_api: RobinhoodApi) -> None:
        options = logged_in_api.get_options()
        assert len(options) == 1
        assert options[0].chain_symbol == "AAPL"


class TestMarketData:
    def test_quote(self, api: RobinhoodApi) -> None:
        quote = api.get_quote_by_ticker("aapl")
        assert quote.symbol == "AAPL"
        assert quote.last_trade_price == Decimal("190.1100")

    def test_quote_unknown_ticker(self, api: RobinhoodApi) -> None:
        with pytest.raises(NotFoundError):
            api.get_quote_by_ticker("ZZZZ")

    def test_quote_list_keeps_order_and_gaps(self, api: RobinhoodApi) -> None:
        quotes = api.get_quote_list_by_tickers(["MSFT", "ZZZZ", "AAPL"])
        assert quotes[0] is not None and quotes[0].symbol == "MSFT"
        assert quotes[1] is None
        assert quotes[2] is not None and quotes[2].symbol == "AAPL"

    def test_quote_list_too_large_sends_nothing(
        self, api: RobinhoodApi, fake: FakeRobinhood
    ) -> None:
        tickers = [f"S{i}" for i in range(market.MAX_QUOTE_BATCH + 1)]
        with pytest.raises(RequestTooLargeError):
            api.get_quote_list_by_tickers(tickers)
        assert fake.requests == []

    def test_fundamental(self, api: RobinhoodApi) -> None:
        assert api.get_fundamental("AAPL").pe_ratio == Decimal("29.5100")

    def test_fundamental_unknown_ticker(self, api: RobinhoodApi) -> None:
        with pytest.raises(NotFoundError):
            api.get_fundamental("TSLA")

    def test_fundamental_server_error_not_mapped(
        self, api: RobinhoodApi, fake: FakeRobinhood
    ) -> None:
        fake.respond_with("GET", "/fundamentals/AAPL/", httpx.Response(503))
        with pytest.raises(RemoteRejectionError):
            api.get_fundamental("AAPL")

    def test_fundamental_list(self, api: RobinhoodApi) -> None:
        rows = api.get_fundamental_list(["AAPL", "TSLA"])
        assert rows[0] is not None
        assert rows[1] is None

    def test_fundamental_list_too_large(self, api: RobinhoodApi) -> None:
        with pytest.raises(RequestTooLargeError):
            api.get_fundamental_list([f"S{i}" for i in range(11)])

    def test_instrument_by_ticker(self, api: RobinhoodApi) -> None:
        inst = api.get_instrument_by_ticker("nvda")
        assert inst.symbol == "NVDA"
        assert inst.tradeable is True

    def test_instrument_unknown_ticker(self, api: RobinhoodApi) -> None:
        with pytest.raises(NotFoundError):
            api.get_instrument_by_ticker("ZZZZ")

    def test_instruments_by_keyword(self, api: RobinhoodApi) -> None:
        symbols = {i.symbol for i in api.get_instruments_by_keyword("micro")}
        assert symbols == {"MSFT", "AMD"}

    def test_all_instruments(self, api: RobinhoodApi, fake: FakeRobinhood) -> None:
        symbols = [i.symbol for i in api.get_all_instruments()]
        assert symbols == ["AAPL", "MSFT", "TSLA", "AMD", "NVDA"]
        assert len(fake.requests_to("/instruments/")) == 3

    def test_collection(self, api: RobinhoodApi) -> None:
        coll = api.get_collection_data("100-most-popular")
        assert coll.name == "100 Most Popular"
        assert coll.instruments == [f"{BASE_URL}instruments/aapl-id/"]

    def test_unknown_collection(self, api: RobinhoodApi) -> None:
        with pytest.raises(RemoteRejectionError):
            api.get_collection_data("nope")

    def test_market_data_works_while_logged_in(self, logged_in_api: RobinhoodApi) -> None:
        assert logged_in_api.get_quote_by_ticker("TSLA").symbol == "TSLA"


class TestPlumbing:
    def test_execute_custom_descriptor(self, api: RobinhoodApi) -> None:
        assert api.execute(market.get_quote("MSFT")).symbol == "MSFT"

    def test_build_iterable_restarts(self, api: RobinhoodApi) -> None:
        page = api.execute(market.get_all_instruments())
        iterable = api.build_iterable(page)
        assert list(iterable) == list(iterable)

    def test_iterate(self, api: RobinhoodApi) -> None:
        page = api.execute(market.get_all_instruments())
        it = api.iterate(page)
        assert next(it).symbol == "AAPL"
