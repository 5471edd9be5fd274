"""Order API port (abstract interface).

Defines the contract for the order creation and payment verification
endpoints. ``HttpOrderApi`` talks to the real server; ``FakeOrderApi`` is an
in-memory stand-in for development and tests.

Implementations raise ``NetworkFailure`` when no response was obtained and
``ServerRejection`` when the server refused the request.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from checkout.api.schemas import (
    CreateOrderRequest,
    CreateOrderResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from checkout.pricing.money import round_minor


@dataclass(frozen=True)
class PlacedOrderResult:
    """Orders created by one placement request."""

    order_ids: tuple[str, ...]
    amount: int
    currency: str
    total: Decimal
    gateway_order_id: str | None = None

    @property
    def is_multi_order(self) -> bool:
        return len(self.order_ids) > 1

    @classmethod
    def from_response(cls, response: CreateOrderResponse) -> "PlacedOrderResult":
        return cls(
            order_ids=tuple(order.id for order in response.orders),
            amount=response.amount,
            currency=response.currency,
            total=round_minor(response.total),
            gateway_order_id=response.razorpay_order_id,
        )


class OrderApi(ABC):
    """Abstract client for the order endpoints."""

    @abstractmethod
    async def create_order(self, request: CreateOrderRequest) -> CreateOrderResponse:
        """Create one order per shop order in the request."""
        ...

    @abstractmethod
    async def verify_payment(self, request: VerifyPaymentRequest) -> VerifyPaymentResponse:
        """Ask the server to verify a signed gateway payment."""
        ...
