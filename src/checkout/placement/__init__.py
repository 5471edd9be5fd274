"""Order API factory.

Provides get_order_api() / set_order_api() to swap implementations:
- FakeOrderApi for development and testing (default)
- HttpOrderApi against a running order service

Selected with the CHECKOUT_ORDER_API environment variable (``fake`` or ``http``).
"""

import os

from checkout.placement.port import OrderApi

_current_order_api: OrderApi | None = None


def get_order_api() -> OrderApi:
    """Return the configured order API (singleton)."""
    global _current_order_api
    if _current_order_api is None:
        adapter = os.environ.get("CHECKOUT_ORDER_API", "fake")
        if adapter == "fake":
            from checkout.placement.fake_adapter import FakeOrderApi

            _current_order_api = FakeOrderApi()
        elif adapter == "http":
            from checkout.placement.http_adapter import HttpOrderApi

            _current_order_api = HttpOrderApi()
        else:
            raise ValueError(f"Unknown order API adapter: {adapter}")
    return _current_order_api


def set_order_api(order_api: OrderApi) -> None:
    """Override the active order API (useful for tests)."""
    global _current_order_api
    _current_order_api = order_api


def reset_order_api() -> None:
    """Reset to the default order API."""
    global _current_order_api
    _current_order_api = None
