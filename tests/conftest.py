"""Shared test fixtures for robinhood-client."""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

from robinhood_client.api import RobinhoodApi
from robinhood_client.config import ClientConfig
from robinhood_client.fake import FakeRobinhood
from robinhood_client.net.executor import RequestExecutor
from robinhood_client.net.session import Session
from tests.factories import BASE_URL, PASSWORD, USERNAME, make_fake


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(base_url=BASE_URL, connect_timeout=1.0, read_timeout=2.0)


@pytest.fixture
def fake() -> FakeRobinhood:
    return make_fake()


@pytest.fixture
def executor(config: ClientConfig, fake: FakeRobinhood) -> Iterator[RequestExecutor]:
    with RequestExecutor(config, transport=fake.transport) as ex:
        yield ex


@pytest.fixture
def session() -> Session:
    return Session()


@pytest.fixture
def logged_in_session(fake: FakeRobinhood) -> Session:
    """Session holding a token the fake accepts."""
    s = Session()
    s.set_token(fake.issue_token())
    return s


@pytest.fixture
def api(config: ClientConfig, fake: FakeRobinhood) -> Iterator[RobinhoodApi]:
    with RobinhoodApi(config=config, transport=fake.transport) as client:
        yield client


@pytest.fixture
def logged_in_api(config: ClientConfig, fake: FakeRobinhood) -> Iterator[RobinhoodApi]:
    with RobinhoodApi(USERNAME, PASSWORD, config=config, transport=fake.transport) as client:
        yield client


@pytest.fixture
def live_credentials() -> tuple[str, str]:
    """Load live credentials from environment variables.

    Skips the test if they are not set.
    """
    username = os.environ.get("RH_USERNAME", "")
    password = os.environ.get("RH_PASSWORD", "")

    if not username or not password:
        pytest.skip(
            "Robinhood credentials not set. Set RH_USERNAME and RH_PASSWORD.",
        )

    return username, password
