"""Checkout configuration.

Pricing rules (tax rate, free-shipping threshold, flat fee) and gateway/API
settings live here rather than as literals in the calculator, so they can be
changed per environment. ``CheckoutConfig.from_env()`` reads ``CHECKOUT_*``
variables; anything unset keeps its default.
"""

import os
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class CheckoutConfig:
    tax_rate_percent: Decimal = Decimal("18")
    free_shipping_threshold: Decimal = Decimal("5000")
    flat_shipping_fee: Decimal = Decimal("100")
    currency: str = "INR"
    gateway_key: str = "test_key"
    gateway_secret: str = "test_secret"
    merchant_name: str = "ShopStream"
    theme_color: str = "#3B82F6"
    api_base_url: str = "http://localhost:8000"
    request_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "CheckoutConfig":
        defaults = cls()
        return cls(
            tax_rate_percent=Decimal(os.environ.get("CHECKOUT_TAX_RATE_PERCENT", defaults.tax_rate_percent)),
            free_shipping_threshold=Decimal(
                os.environ.get("CHECKOUT_FREE_SHIPPING_THRESHOLD", defaults.free_shipping_threshold)
            ),
            flat_shipping_fee=Decimal(os.environ.get("CHECKOUT_FLAT_SHIPPING_FEE", defaults.flat_shipping_fee)),
            currency=os.environ.get("CHECKOUT_CURRENCY", defaults.currency),
            gateway_key=os.environ.get("RAZORPAY_KEY_ID", defaults.gateway_key),
            gateway_secret=os.environ.get("RAZORPAY_KEY_SECRET", defaults.gateway_secret),
            merchant_name=os.environ.get("CHECKOUT_MERCHANT_NAME", defaults.merchant_name),
            theme_color=defaults.theme_color,
            api_base_url=os.environ.get("CHECKOUT_API_BASE_URL", defaults.api_base_url),
            request_timeout=float(os.environ.get("CHECKOUT_REQUEST_TIMEOUT", defaults.request_timeout)),
        )


_current_config: CheckoutConfig | None = None


def get_config() -> CheckoutConfig:
    """Return the active configuration, loading it from the environment once."""
    global _current_config
    if _current_config is None:
        _current_config = CheckoutConfig.from_env()
    return _current_config


def set_config(config: CheckoutConfig) -> None:
    """Override the active configuration (useful for tests)."""
    global _current_config
    _current_config = config


def reset_config() -> None:
    """Drop the cached configuration so the next read goes back to the environment."""
    global _current_config
    _current_config = None
