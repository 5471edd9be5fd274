"""Configurable fake payment widget for development and testing.

Simulates the gateway's client library without any external calls. The
factory can be configured to make every widget succeed, fail or be dismissed
as soon as it opens, or to stay open until the test drives it by hand.
Successful payments are signed with the configured secret exactly as the
real gateway would, so server-side verification can check them.
"""

import asyncio
from collections.abc import Callable
from uuid import uuid4

from checkout.config import get_config
from checkout.gateway.port import PAYMENT_FAILED, PAYMENT_SUCCESS, PaymentWidget
from checkout.gateway.signature import sign_payment

OUTCOMES = ("success", "failure", "dismiss", "manual")


class FakeWidget(PaymentWidget):
    def __init__(self, options: dict, factory: "FakeWidgetFactory") -> None:
        self.options = options
        self.factory = factory
        self.handlers: dict[str, list[Callable[[dict], None]]] = {}
        self.opened = False

    def on(self, event: str, handler: Callable[[dict], None]) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def open(self) -> None:
        self.opened = True
        outcome = self.factory.outcome
        if outcome == "success":
            asyncio.get_running_loop().call_soon(self.succeed)
        elif outcome == "failure":
            asyncio.get_running_loop().call_soon(self.fail, self.factory.failure_description)
        elif outcome == "dismiss":
            asyncio.get_running_loop().call_soon(self.dismiss)

    def _emit(self, event: str, response: dict) -> None:
        for handler in self.handlers.get(event, []):
            handler(response)

    def succeed(self, payment_id: str | None = None) -> None:
        payment_id = payment_id or f"pay_{uuid4().hex[:14]}"
        order_id = self.options["order_id"]
        signature = (
            "tampered-signature"
            if self.factory.tamper_signature
            else sign_payment(order_id, payment_id, self.factory.secret)
        )
        self._emit(
            PAYMENT_SUCCESS,
            {
                "razorpay_payment_id": payment_id,
                "razorpay_order_id": order_id,
                "razorpay_signature": signature,
            },
        )

    def fail(self, description: str | None = None) -> None:
        self._emit(PAYMENT_FAILED, {"error": {"description": description}})

    def dismiss(self) -> None:
        self.options["modal"]["ondismiss"]()


class FakeWidgetFactory:
    """Creates ``FakeWidget`` instances; behaves like the gateway library being loaded."""

    def __init__(self, secret: str | None = None) -> None:
        self.secret = secret or get_config().gateway_secret
        self.outcome: str = "success"
        self.failure_description: str | None = "Card declined"
        self.tamper_signature: bool = False
        self.widgets: list[FakeWidget] = []

    def configure(
        self,
        outcome: str = "success",
        failure_description: str | None = "Card declined",
        tamper_signature: bool = False,
    ) -> None:
        """Configure widget behavior at runtime."""
        if outcome not in OUTCOMES:
            raise ValueError(f"Unknown widget outcome: {outcome}")
        self.outcome = outcome
        self.failure_description = failure_description
        self.tamper_signature = tamper_signature

    @property
    def last_widget(self) -> FakeWidget | None:
        return self.widgets[-1] if self.widgets else None

    def __call__(self, options: dict) -> FakeWidget:
        widget = FakeWidget(options, self)
        self.widgets.append(widget)
        return widget
