"""Payment verification — the server checks the gateway's signed payload.

A payment is never treated as successful on the client until the server has
verified it. Verification is not retried automatically; a failure is final
for that payment attempt and the orders stay pending server-side.
"""

from collections.abc import Sequence

import structlog

from checkout.api.schemas import VerifyPaymentRequest
from checkout.errors import CheckoutError, VerificationFailure
from checkout.placement.port import OrderApi

logger = structlog.get_logger(__name__)


class PaymentVerifier:
    def __init__(self, order_api: OrderApi) -> None:
        self.order_api = order_api

    async def verify(
        self,
        order_ids: Sequence[str],
        gateway_order_id: str,
        gateway_payment_id: str,
        gateway_signature: str,
    ) -> None:
        """Verify a gateway payment; raises ``VerificationFailure`` with the server's reason."""
        request = VerifyPaymentRequest(
            order_ids=list(order_ids),
            razorpay_order_id=gateway_order_id,
            razorpay_payment_id=gateway_payment_id,
            razorpay_signature=gateway_signature,
        )
        try:
            response = await self.order_api.verify_payment(request)
        except CheckoutError as exc:
            logger.error(
                "Payment verification failed",
                component="PaymentVerifier.verify",
                order_ids=list(order_ids),
                gateway_order_id=gateway_order_id,
                gateway_payment_id=gateway_payment_id,
                error=exc.message,
            )
            raise VerificationFailure(exc.message) from exc

        if not response.success:
            raise VerificationFailure()

        logger.info("Payment verified", order_ids=list(order_ids), gateway_payment_id=gateway_payment_id)
