"""Per-endpoint descriptor builders and the types they decode into."""

from robinhood_client.endpoints import account, authorize, market, orders

__all__ = ["account", "authorize", "market", "orders"]
