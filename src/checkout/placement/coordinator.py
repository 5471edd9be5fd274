"""Order placement — one request for every seller order in the checkout.

The server creates all seller orders together. For COD the response already
represents completed orders; for the gateway method it also carries the
gateway order id and the payable amount in minor units, and control passes to
the payment gateway adapter.

Placement is safe to retry: nothing is recorded client-side as "in progress"
between attempts.
"""

from collections.abc import Sequence

import structlog

from checkout.api.schemas import CreateOrderRequest, OrderLineSchema, ShopOrderSchema
from checkout.cart.partition import SellerOrderDraft
from checkout.errors import ServerRejection, ValidationFailure
from checkout.placement.port import OrderApi, PlacedOrderResult
from checkout.session.state import CheckoutState, PaymentMethod
from checkout.session.transitions import PAYMENT_METHOD_REQUIRED_MESSAGE, address_errors

logger = structlog.get_logger(__name__)


def build_placement_request(state: CheckoutState, seller_drafts: Sequence[SellerOrderDraft]) -> CreateOrderRequest:
    """Translate the checkout state and seller drafts into the order creation request."""
    errors = {field: [message] for field, message in address_errors(state).items()}
    if state.payment_method is None:
        errors["payment_method"] = [PAYMENT_METHOD_REQUIRED_MESSAGE]
    if errors:
        raise ValidationFailure(errors)

    shop_orders = []
    for draft in seller_drafts:
        coupon = state.coupons.get(draft.seller_id)
        shop_orders.append(
            ShopOrderSchema(
                shop_id=draft.seller_id,
                shop_name=draft.seller_name,
                items=[OrderLineSchema.model_validate(item.to_wire()) for item in draft.items],
                coupon_code=coupon.code if coupon is not None else None,
            )
        )

    notes = (state.notes or "").strip()
    return CreateOrderRequest(
        shipping_address_id=state.shipping_address_id,
        billing_address_id=state.effective_billing_address_id,
        payment_method=state.payment_method.value,
        shop_orders=shop_orders,
        notes=notes or None,
    )


class OrderPlacementCoordinator:
    def __init__(self, order_api: OrderApi) -> None:
        self.order_api = order_api

    async def place_order(
        self,
        checkout_state: CheckoutState,
        seller_drafts: Sequence[SellerOrderDraft],
    ) -> PlacedOrderResult:
        """Submit the placement request.

        Raises:
            ValidationFailure: a required selection is missing.
            NetworkFailure: the request could not be completed.
            ServerRejection: the server refused the order.
        """
        request = build_placement_request(checkout_state, seller_drafts)
        response = await self.order_api.create_order(request)
        result = PlacedOrderResult.from_response(response)

        if not result.order_ids:
            raise ServerRejection("No orders were created")
        if checkout_state.payment_method == PaymentMethod.GATEWAY and not result.gateway_order_id:
            raise ServerRejection("Payment could not be initiated. Please try again.")

        logger.info(
            "Orders placed",
            order_ids=list(result.order_ids),
            payment_method=checkout_state.payment_method.value,
            amount=result.amount,
            currency=result.currency,
            gateway_order_id=result.gateway_order_id,
        )
        return result
