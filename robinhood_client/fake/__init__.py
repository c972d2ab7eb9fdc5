"""In-memory stand-in for the remote service, for tests and demos."""

from robinhood_client.fake.remote import FakeRobinhood

__all__ = ["FakeRobinhood"]
