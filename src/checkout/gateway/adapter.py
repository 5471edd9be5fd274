"""Payment gateway adapter.

Wraps the callback-driven widget behind a single awaitable result:

    Idle → Opened → Succeeded | Failed
    Idle → Unavailable            (widget library not present)

The adapter never times out on its own. It stays ``Opened`` until the widget
reports success, failure or dismissal; a dismissal counts as a failure with a
neutral message. A success is only a candidate: the caller must still have the
payment verified by the server.
"""

import asyncio

import structlog

from checkout.config import CheckoutConfig, get_config
from checkout.errors import GatewayFailed, GatewayUnavailable
from checkout.gateway.port import (
    PAYMENT_FAILED,
    PAYMENT_SUCCESS,
    GatewayPayment,
    GatewayResult,
    GatewayStatus,
    WidgetFactory,
)
from checkout.placement.port import PlacedOrderResult
from checkout.shared.shopper import Shopper

logger = structlog.get_logger(__name__)

DISMISSED_MESSAGE = "Payment was cancelled. Your order has not been placed."


class PaymentGatewayAdapter:
    def __init__(self, widget_factory: WidgetFactory | None, config: CheckoutConfig | None = None) -> None:
        self.widget_factory = widget_factory
        self.config = config or get_config()
        self.status = GatewayStatus.IDLE

    def build_options(self, placed: PlacedOrderResult, shopper: Shopper, on_dismiss) -> dict:
        return {
            "key": self.config.gateway_key,
            "amount": placed.amount,
            "currency": placed.currency,
            "name": self.config.merchant_name,
            "description": f"{len(placed.order_ids)} order(s) - Total ₹{placed.total}",
            "order_id": placed.gateway_order_id,
            "prefill": {
                "name": shopper.display_name,
                "email": shopper.email,
            },
            "theme": {"color": self.config.theme_color},
            "modal": {"ondismiss": on_dismiss},
        }

    async def pay(self, placed: PlacedOrderResult, shopper: Shopper) -> GatewayResult:
        """Open the gateway for a placed order and wait for its terminal outcome."""
        self.status = GatewayStatus.IDLE

        if self.widget_factory is None:
            self.status = GatewayStatus.UNAVAILABLE
            logger.warning(
                "Payment gateway not available",
                component="PaymentGatewayAdapter.pay",
                order_ids=list(placed.order_ids),
            )
            return GatewayResult(status=GatewayStatus.UNAVAILABLE, error=GatewayUnavailable())

        outcome: asyncio.Future[GatewayResult] = asyncio.get_running_loop().create_future()

        def settle(result: GatewayResult) -> None:
            # Only the first terminal callback counts
            if not outcome.done():
                outcome.set_result(result)

        def on_success(response: dict) -> None:
            payment_id = response.get("razorpay_payment_id")
            order_id = response.get("razorpay_order_id")
            signature = response.get("razorpay_signature")
            if not (payment_id and order_id and signature):
                settle(GatewayResult(status=GatewayStatus.FAILED, error=GatewayFailed("Incomplete payment response")))
                return
            settle(
                GatewayResult(
                    status=GatewayStatus.SUCCEEDED,
                    payment=GatewayPayment(payment_id=payment_id, order_id=order_id, signature=signature),
                )
            )

        def on_failure(response: dict) -> None:
            description = (response.get("error") or {}).get("description")
            settle(GatewayResult(status=GatewayStatus.FAILED, error=GatewayFailed(description)))

        def on_dismiss() -> None:
            settle(GatewayResult(status=GatewayStatus.FAILED, error=GatewayFailed(DISMISSED_MESSAGE), dismissed=True))

        widget = self.widget_factory(self.build_options(placed, shopper, on_dismiss))
        widget.on(PAYMENT_SUCCESS, on_success)
        widget.on(PAYMENT_FAILED, on_failure)

        self.status = GatewayStatus.OPENED
        logger.info("Opening payment gateway", gateway_order_id=placed.gateway_order_id, amount=placed.amount)
        widget.open()

        result = await outcome
        self.status = result.status

        if not result.succeeded:
            logger.error(
                "Payment failed",
                component="PaymentGatewayAdapter.pay",
                gateway_order_id=placed.gateway_order_id,
                dismissed=result.dismissed,
                error=result.message,
            )
        return result
