"""Account and account-holder descriptors. All require a token."""

from __future__ import annotations

from robinhood_client.endpoints.types import (
    Account,
    AccountHolderAffiliation,
    AccountHolderEmployment,
    AccountHolderInfo,
    BasicUserInfo,
    InvestmentProfile,
    Position,
)
from robinhood_client.net.method import ApiMethod
from robinhood_client.net.pagination import Page


def get_accounts() -> ApiMethod:
    return ApiMethod.get("accounts/", requires_auth=True, result_shape=Page[Account])


def get_basic_user_info() -> ApiMethod:
    return ApiMethod.get("user/", requires_auth=True, result_shape=BasicUserInfo)


def get_account_holder_info() -> ApiMethod:
    return ApiMethod.get(
        "user/basic_info/", requires_auth=True, result_shape=AccountHolderInfo
    )


def get_account_holder_employment() -> ApiMethod:
    return ApiMethod.get(
        "user/employment/", requires_auth=True, result_shape=AccountHolderEmployment
    )


def get_account_holder_affiliation() -> ApiMethod:
    return ApiMethod.get(
        "user/additional_info/", requires_auth=True, result_shape=AccountHolderAffiliation
    )


def get_investment_profile() -> ApiMethod:
    return ApiMethod.get(
        "user/investment_profile/", requires_auth=True, result_shape=InvestmentProfile
    )


def get_positions(account_number: str) -> ApiMethod:
    """Every instrument on the account's watchlist, held or not."""
    return ApiMethod.get(
        "accounts/{account_number}/positions/",
        params={"account_number": account_number},
        requires_auth=True,
        result_shape=Page[Position],
    )
