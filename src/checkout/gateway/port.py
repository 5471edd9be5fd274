"""Payment widget port (abstract interface) and gateway result types.

The widget is the gateway's client-side library: it is created with an
options dict, accepts ``on(event, handler)`` registrations and is opened once.
It reports back through exactly two events, plus the ``modal.ondismiss``
callback in its options when the shopper closes it.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from checkout.errors import CheckoutError

PAYMENT_SUCCESS = "payment.success"
PAYMENT_FAILED = "payment.failed"


class PaymentWidget(ABC):
    """Abstract gateway widget."""

    @abstractmethod
    def on(self, event: str, handler: Callable[[dict], None]) -> None:
        """Register a handler for ``payment.success`` or ``payment.failed``."""
        ...

    @abstractmethod
    def open(self) -> None:
        """Show the payment UI. Returns immediately; outcomes arrive through handlers."""
        ...


WidgetFactory = Callable[[dict], PaymentWidget]


class GatewayStatus(Enum):
    IDLE = "idle"
    OPENED = "opened"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class GatewayPayment:
    """Signed payload from a successful gateway payment."""

    payment_id: str
    order_id: str
    signature: str


@dataclass(frozen=True)
class GatewayResult:
    """Terminal outcome of one gateway session."""

    status: GatewayStatus
    payment: GatewayPayment | None = None
    error: CheckoutError | None = None
    dismissed: bool = False

    @property
    def succeeded(self) -> bool:
        return self.status == GatewayStatus.SUCCEEDED

    @property
    def message(self) -> str | None:
        return self.error.message if self.error is not None else None
