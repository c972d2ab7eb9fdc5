"""Order and option descriptors.

Orders are posted once. The executor never retries, so a timeout on
``place_order`` leaves the outcome unknown; check ``get_orders`` before
resubmitting.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from robinhood_client.endpoints.types import (
    OptionPosition,
    OrderSide,
    OrderTrigger,
    OrderType,
    SecurityOrder,
    TimeInForce,
)
from robinhood_client.net.method import ApiMethod
from robinhood_client.net.pagination import Page


@dataclass(frozen=True)
class OrderRequest:
    """Immutable order request — describes what to submit.

    LIMIT orders need ``limit_price``; STOP-triggered orders need
    ``stop_price``.
    """

    symbol: str
    side: OrderSide
    quantity: int
    order_type: OrderType
    time_in_force: TimeInForce = TimeInForce.GFD
    trigger: OrderTrigger = OrderTrigger.IMMEDIATE
    limit_price: Decimal | None = None
    stop_price: Decimal | None = None

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValueError(f"quantity must be positive, got {self.quantity}")
        if self.order_type is OrderType.LIMIT and self.limit_price is None:
            raise ValueError("LIMIT orders require limit_price")
        if self.order_type is OrderType.MARKET and self.limit_price is not None:
            raise ValueError("MARKET orders take no limit_price")
        if self.trigger is OrderTrigger.STOP and self.stop_price is None:
            raise ValueError("STOP orders require stop_price")
        if self.trigger is OrderTrigger.IMMEDIATE and self.stop_price is not None:
            raise ValueError("stop_price is only valid with a STOP trigger")


def get_orders() -> ApiMethod:
    """Open and closed orders, newest first."""
    return ApiMethod.get("orders/", requires_auth=True, result_shape=Page[SecurityOrder])


def place_order(order: OrderRequest, account_url: str, instrument_url: str) -> ApiMethod:
    params: dict[str, Any] = {
        "account": account_url,
        "instrument": instrument_url,
        "symbol": order.symbol.upper(),
        "type": order.order_type.value,
        "time_in_force": order.time_in_force.value,
        "trigger": order.trigger.value,
        "quantity": order.quantity,
        "side": order.side.value,
    }
    if order.limit_price is not None:
        params["price"] = order.limit_price
    if order.stop_price is not None:
        params["stop_price"] = order.stop_price
    return ApiMethod.post(
        "orders/", params=params, requires_auth=True, result_shape=SecurityOrder
    )


def cancel_order(order_id: str) -> ApiMethod:
    return ApiMethod.post(
        "orders/{order_id}/cancel/",
        params={"order_id": order_id},
        requires_auth=True,
    )


def get_option_positions() -> ApiMethod:
    return ApiMethod.get(
        "options/positions/", requires_auth=True, result_shape=Page[OptionPosition]
    )
