"""Data-holder types decoded from remote responses.

Every model ignores unknown JSON fields, so additions on the remote side
never break decoding. Monetary values are Decimal (the service sends them
as strings). Fields the service sometimes omits are optional; the few
that identify a record are required and fail decoding when absent.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class OrderSide(str, Enum):
    BUY = "buy"
    SELL = "sell"


class OrderType(str, Enum):
    MARKET = "market"
    LIMIT = "limit"


class OrderTrigger(str, Enum):
    """IMMEDIATE submits right away; STOP waits for stop_price."""

    IMMEDIATE = "immediate"
    STOP = "stop"


class TimeInForce(str, Enum):
    """Good for day, good till canceled, immediate or cancel, at the open."""

    GFD = "gfd"
    GTC = "gtc"
    IOC = "ioc"
    OPG = "opg"


class ApiElement(BaseModel):
    """Base for all decoded records."""

    model_config = ConfigDict(extra="ignore", frozen=True)


# --- Authorization ---


class Token(ApiElement):
    token: str | None = None


# --- Account ---


class Account(ApiElement):
    """Brokerage account. account_number is absent on a broken login."""

    account_number: str | None = None
    url: str | None = None
    type: str | None = None
    cash: Decimal | None = None
    buying_power: Decimal | None = None
    cash_available_for_withdrawal: Decimal | None = None
    deactivated: bool = False
    created_at: datetime | None = None


class BasicUserInfo(ApiElement):
    username: str
    id: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    url: str | None = None


class AccountHolderInfo(ApiElement):
    phone_number: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None
    citizenship: str | None = None
    marital_status: str | None = None
    number_dependents: int | None = None
    date_of_birth: str | None = None


class AccountHolderEmployment(ApiElement):
    employment_status: str | None = None
    employer_name: str | None = None
    occupation: str | None = None
    years_employed: int | None = None


class AccountHolderAffiliation(ApiElement):
    """Regulatory disclosures from user/additional_info/."""

    control_person: bool | None = None
    control_person_security_affiliation: str | None = None
    object_to_disclosure: bool | None = None
    security_affiliated_employee: bool | None = None
    security_affiliated_firm_relationship: str | None = None
    security_affiliated_firm_name: str | None = None
    security_affiliated_person_name: str | None = None
    security_affiliated_address: str | None = None
    sweep_consent: bool | None = None
    stock_loan_consent_status: str | None = None
    updated_at: str | None = None


class InvestmentProfile(ApiElement):
    annual_income: str | None = None
    investment_experience: str | None = None
    investment_objective: str | None = None
    risk_tolerance: str | None = None
    time_horizon: str | None = None
    liquid_net_worth: str | None = None
    total_net_worth: str | None = None


class Position(ApiElement):
    """Watchlist entry. quantity > 0 means shares are actually held."""

    instrument: str
    quantity: Decimal = Decimal("0")
    average_buy_price: Decimal | None = None
    intraday_quantity: Decimal | None = None
    shares_held_for_sells: Decimal | None = None
    account: str | None = None
    url: str | None = None
    updated_at: datetime | None = None


# --- Orders ---


class SecurityOrder(ApiElement):
    id: str
    url: str | None = None
    cancel: str | None = None
    instrument: str | None = None
    state: str | None = None
    side: OrderSide | None = None
    type: OrderType | None = None
    trigger: OrderTrigger | None = None
    time_in_force: TimeInForce | None = None
    quantity: Decimal | None = None
    cumulative_quantity: Decimal | None = None
    price: Decimal | None = None
    stop_price: Decimal | None = None
    average_price: Decimal | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_cancelable(self) -> bool:
        """The service only exposes a cancel URL while the order is open."""
        return self.cancel is not None


class OptionPosition(ApiElement):
    chain_symbol: str | None = None
    option: str | None = None
    type: str | None = None
    quantity: Decimal = Decimal("0")
    average_price: Decimal | None = None
    url: str | None = None


# --- Market data ---


class TickerQuote(ApiElement):
    symbol: str
    ask_price: Decimal | None = None
    ask_size: int | None = None
    bid_price: Decimal | None = None
    bid_size: int | None = None
    last_trade_price: Decimal | None = None
    last_extended_hours_trade_price: Decimal | None = None
    previous_close: Decimal | None = None
    trading_halted: bool = False
    updated_at: datetime | None = None
    instrument: str | None = None


class TickerFundamental(ApiElement):
    symbol: str | None = None
    open: Decimal | None = None
    high: Decimal | None = None
    low: Decimal | None = None
    volume: Decimal | None = None
    average_volume: Decimal | None = None
    high_52_weeks: Decimal | None = None
    low_52_weeks: Decimal | None = None
    market_cap: Decimal | None = None
    pe_ratio: Decimal | None = None
    dividend_yield: Decimal | None = None
    description: str | None = None
    instrument: str | None = None


class Instrument(ApiElement):
    symbol: str
    id: str | None = None
    url: str | None = None
    name: str | None = None
    simple_name: str | None = None
    quote: str | None = None
    fundamentals: str | None = None
    state: str | None = None
    type: str | None = None
    tradeable: bool = False
    country: str | None = None
    min_tick_size: Decimal | None = None
    day_trade_ratio: Decimal | None = None


class InstrumentCollection(ApiElement):
    """Named group of instruments, e.g. '100-most-popular'."""

    slug: str | None = None
    name: str | None = None
    description: str | None = None
    instruments: list[str] = Field(default_factory=list)
