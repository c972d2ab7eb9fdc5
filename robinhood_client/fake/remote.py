"""FakeRobinhood — in-memory remote service for testing.

Serves the JSON endpoints the client uses through ``httpx.MockTransport``.
Supply canned records at construction, inspect ``requests`` after test
execution, or override single routes with ``respond_with`` /
``fail_with``.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Callable
from typing import Any
from urllib.parse import parse_qs, unquote

import httpx

Handler = Callable[[httpx.Request], httpx.Response]

BASE_URL = "https://api.robinhood.com/"

_NOT_FOUND = {"detail": "Not found."}


def _json(payload: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=payload)


class FakeRobinhood:
    """In-memory remote service.

    ``users`` maps username to password. Every successful login hands out
    a fresh token. Quote lookups for unknown symbols answer 200 with an
    empty body, as the live service does; fundamentals answer 404.
    """

    def __init__(
        self,
        users: dict[str, str] | None = None,
        account: dict[str, Any] | None = None,
        quotes: dict[str, dict[str, Any]] | None = None,
        fundamentals: dict[str, dict[str, Any]] | None = None,
        instruments: list[dict[str, Any]] | None = None,
        positions: list[dict[str, Any]] | None = None,
        orders: list[dict[str, Any]] | None = None,
        option_positions: list[dict[str, Any]] | None = None,
        collections: dict[str, dict[str, Any]] | None = None,
        page_size: int = 2,
    ) -> None:
        self.users = users if users is not None else {}
        self.account = account
        self.quotes = quotes if quotes is not None else {}
        self.fundamentals = fundamentals if fundamentals is not None else {}
        self.instruments = instruments if instruments is not None else []
        self.positions = positions if positions is not None else []
        self.orders = orders if orders is not None else []
        self.option_positions = option_positions if option_positions is not None else []
        self.collections = collections if collections is not None else {}
        self.page_size = page_size
        self.tokens: set[str] = set()
        self.requests: list[httpx.Request] = []
        self._overrides: dict[tuple[str, str], Handler] = {}

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def issue_token(self) -> str:
        token = uuid.uuid4().hex
        self.tokens.add(token)
        return token

    def respond_with(self, verb: str, path: str, response: httpx.Response) -> None:
        """Answer ``verb path`` with a fixed response from now on."""
        self._overrides[(verb, path)] = lambda request: response

    def fail_with(self, verb: str, path: str, error: Exception) -> None:
        """Raise ``error`` (e.g. httpx.ConnectError) for ``verb path``."""

        def _raise(request: httpx.Request) -> httpx.Response:
            raise error

        self._overrides[(verb, path)] = _raise

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    # --- Routing ---

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key in self._overrides:
            return self._overrides[key](request)

        raw_path = request.url.raw_path.decode("ascii").partition("?")[0]

        for verb, pattern, needs_auth, handler in self._routes():
            if verb != request.method:
                continue
            # match encoded segments so an escaped "/" stays inside its group
            match = re.fullmatch(pattern, raw_path)
            if match is None:
                continue
            if needs_auth and not self._authorized(request):
                return _json({"detail": "Authentication credentials were not provided."}, 401)
            return handler(request, *(unquote(g) for g in match.groups()))
        return _json(_NOT_FOUND, 404)

    def _routes(self) -> list[tuple[str, str, bool, Callable[..., httpx.Response]]]:
        return [
            ("POST", r"/api-token-auth/", False, self._login),
            ("POST", r"/api-token-logout/", True, self._logout),
            ("GET", r"/accounts/", True, self._accounts),
            ("GET", r"/accounts/([^/]+)/positions/", True, self._positions),
            ("GET", r"/user/", True, self._user),
            ("GET", r"/user/basic_info/", True, self._user_basic_info),
            ("GET", r"/user/employment/", True, self._user_employment),
            ("GET", r"/user/investment_profile/", True, self._user_investment_profile),
            ("GET", r"/user/additional_info/", True, self._user_additional_info),
            ("GET", r"/orders/", True, self._list_orders),
            ("POST", r"/orders/", True, self._create_order),
            ("POST", r"/orders/([^/]+)/cancel/", True, self._cancel_order),
            ("GET", r"/options/positions/", True, self._option_positions),
            ("GET", r"/quotes/", False, self._quote_list),
            ("GET", r"/quotes/([^/]+)/", False, self._quote),
            ("GET", r"/fundamentals/", False, self._fundamental_list),
            ("GET", r"/fundamentals/([^/]+)/", False, self._fundamental),
            ("GET", r"/instruments/", False, self._instruments),
            ("GET", r"/midlands/tags/tag/([^/]+)/", False, self._collection),
        ]

    def _authorized(self, request: httpx.Request) -> bool:
        _, _, token = request.headers.get("Authorization", "").partition(" ")
        return token in self.tokens

    def _paginate(self, request: httpx.Request, items: list[Any]) -> httpx.Response:
        offset = int(request.url.params.get("cursor", "0"))
        chunk = items[offset : offset + self.page_size]
        next_offset = offset + self.page_size
        previous = None
        if offset > 0:
            previous_offset = max(offset - self.page_size, 0)
            previous = str(request.url.copy_set_param("cursor", str(previous_offset)))
        next_url = None
        if next_offset < len(items):
            next_url = str(request.url.copy_set_param("cursor", str(next_offset)))
        return _json({"results": chunk, "next": next_url, "previous": previous})

    # --- Handlers ---

    def _login(self, request: httpx.Request) -> httpx.Response:
        form = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
        username = form.get("username", "")
        if username not in self.users or self.users[username] != form.get("password"):
            return _json(
                {"non_field_errors": ["Unable to log in with provided credentials."]}, 400
            )
        return _json({"token": self.issue_token()})

    def _logout(self, request: httpx.Request) -> httpx.Response:
        _, _, token = request.headers["Authorization"].partition(" ")
        self.tokens.discard(token)
        return httpx.Response(200)

    def _accounts(self, request: httpx.Request) -> httpx.Response:
        return self._paginate(request, [self.account] if self.account is not None else [])

    def _positions(self, request: httpx.Request, account_number: str) -> httpx.Response:
        if self.account is None or self.account.get("account_number") != account_number:
            return _json(_NOT_FOUND, 404)
        return self._paginate(request, self.positions)

    def _user(self, request: httpx.Request) -> httpx.Response:
        return _json(
            {
                "username": next(iter(self.users), "user"),
                "id": "user-1",
                "first_name": "Test",
                "last_name": "User",
                "email": "test@example.com",
            }
        )

    def _user_basic_info(self, request: httpx.Request) -> httpx.Response:
        return _json({"city": "Menlo Park", "state": "CA", "zipcode": "94025"})

    def _user_employment(self, request: httpx.Request) -> httpx.Response:
        return _json({"employment_status": "employed", "occupation": "Engineer"})

    def _user_investment_profile(self, request: httpx.Request) -> httpx.Response:
        return _json(
            {"risk_tolerance": "med_risk_tolerance", "time_horizon": "long_time_horizon"}
        )

    def _user_additional_info(self, request: httpx.Request) -> httpx.Response:
        return _json(
            {
                "control_person": False,
                "object_to_disclosure": False,
                "security_affiliated_employee": False,
                "sweep_consent": True,
                "stock_loan_consent_status": "consented",
                "updated_at": "2018-01-02T15:04:05Z",
            }
        )

    def _list_orders(self, request: httpx.Request) -> httpx.Response:
        return self._paginate(request, self.orders)

    def _create_order(self, request: httpx.Request) -> httpx.Response:
        form = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
        order_id = str(uuid.uuid4())
        order = {
            "id": order_id,
            "url": f"{BASE_URL}orders/{order_id}/",
            "cancel": f"{BASE_URL}orders/{order_id}/cancel/",
            "instrument": form.get("instrument"),
            "state": "queued",
            "side": form.get("side"),
            "type": form.get("type"),
            "trigger": form.get("trigger"),
            "time_in_force": form.get("time_in_force"),
            "quantity": form.get("quantity"),
            "cumulative_quantity": "0.00000",
            "price": form.get("price"),
            "stop_price": form.get("stop_price"),
        }
        self.orders.insert(0, order)
        return _json(order, 201)

    def _cancel_order(self, request: httpx.Request, order_id: str) -> httpx.Response:
        for order in self.orders:
            if order["id"] == order_id and order.get("cancel"):
                order["state"] = "cancelled"
                order["cancel"] = None
                return _json({})
        return _json(_NOT_FOUND, 404)

    def _option_positions(self, request: httpx.Request) -> httpx.Response:
        return self._paginate(request, self.option_positions)

    def _quote(self, request: httpx.Request, symbol: str) -> httpx.Response:
        if symbol not in self.quotes:
            return httpx.Response(200, content=b"")
        return _json(self.quotes[symbol])

    def _quote_list(self, request: httpx.Request) -> httpx.Response:
        symbols = request.url.params.get("symbols", "").split(",")
        return _json({"results": [self.quotes.get(s) for s in symbols], "next": None})

    def _fundamental(self, request: httpx.Request, symbol: str) -> httpx.Response:
        if symbol not in self.fundamentals:
            return _json(_NOT_FOUND, 404)
        return _json(self.fundamentals[symbol])

    def _fundamental_list(self, request: httpx.Request) -> httpx.Response:
        symbols = request.url.params.get("symbols", "").split(",")
        return _json({"results": [self.fundamentals.get(s) for s in symbols], "next": None})

    def _instruments(self, request: httpx.Request) -> httpx.Response:
        params = request.url.params
        items = self.instruments
        if "symbol" in params:
            items = [i for i in items if i.get("symbol") == params["symbol"]]
        elif "query" in params:
            keyword = params["query"].lower()
            items = [
                i
                for i in items
                if keyword in i.get("symbol", "").lower()
                or keyword in (i.get("name") or "").lower()
            ]
        return self._paginate(request, items)

    def _collection(self, request: httpx.Request, name: str) -> httpx.Response:
        if name not in self.collections:
            return _json(_NOT_FOUND, 404)
        return _json(self.collections[name])

