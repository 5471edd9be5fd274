"""Configurable in-memory order service for development and testing.

Stands in for the order creation and payment verification endpoints without
any network calls. Orders are priced with the same rules the client uses, so
the payable amount matches what the shopper saw on the review step.

It can be configured at runtime to reject the next placements or to behave
as if the network were down.
"""

from uuid import uuid4

from protean.exceptions import ValidationError

from checkout.api.schemas import (
    CreatedOrderSchema,
    CreateOrderRequest,
    CreateOrderResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from checkout.cart.items import CartItem
from checkout.cart.partition import SellerOrderDraft
from checkout.config import CheckoutConfig, get_config
from checkout.errors import CheckoutError, NetworkFailure, ServerRejection, first_message
from checkout.gateway.signature import verify_signature
from checkout.placement.port import OrderApi
from checkout.pricing.coupons import AppliedCoupon, CouponPricing, PercentageCouponPricing
from checkout.pricing.money import to_minor_units
from checkout.pricing.totals import compute_totals
from checkout.session.state import PaymentMethod


class FakeOrderApi(OrderApi):
    """In-memory order service."""

    def __init__(self, config: CheckoutConfig | None = None, coupon_pricing: CouponPricing | None = None) -> None:
        self.config = config or get_config()
        self.coupon_pricing = coupon_pricing or PercentageCouponPricing()
        self.reject_with: str | None = None
        self.network_down: bool = False
        self.orders: dict[str, dict] = {}
        self.calls: list[dict] = []

    def configure(self, reject_with: str | None = None, network_down: bool = False) -> None:
        """Configure service behavior at runtime."""
        self.reject_with = reject_with
        self.network_down = network_down

    def _draft_for(self, shop_order) -> SellerOrderDraft:
        items = tuple(
            CartItem(
                item_id=line.id,
                product_id=line.product_id,
                product_name=line.product_name,
                unit_price=line.price,
                quantity=line.quantity,
                line_total=line.line_total,
                seller_id=shop_order.shop_id,
                seller_name=shop_order.shop_name,
            )
            for line in shop_order.items
        )
        draft = SellerOrderDraft(seller_id=shop_order.shop_id, seller_name=shop_order.shop_name, items=items)
        if shop_order.coupon_code:
            discount = self.coupon_pricing.discount_for(shop_order.coupon_code, draft)
            draft = draft.with_coupon(AppliedCoupon(code=shop_order.coupon_code, discount_amount=float(discount)))
        return draft

    async def create_order(self, request: CreateOrderRequest) -> CreateOrderResponse:
        self.calls.append({"method": "create_order", "request": request.model_dump(by_alias=True)})

        if self.network_down:
            raise NetworkFailure()
        if self.reject_with:
            raise ServerRejection(self.reject_with, status_code=400)
        if not request.shop_orders:
            raise ServerRejection("Cart is empty", status_code=400)

        try:
            drafts = [self._draft_for(shop_order) for shop_order in request.shop_orders]
        except ValidationError as exc:
            raise ServerRejection(first_message(exc.messages), status_code=400) from exc
        except CheckoutError as exc:
            raise ServerRejection(exc.message, status_code=400) from exc

        totals = compute_totals(
            drafts,
            tax_rate_percent=self.config.tax_rate_percent,
            free_shipping_threshold=self.config.free_shipping_threshold,
            flat_shipping_fee=self.config.flat_shipping_fee,
        )

        is_gateway = request.payment_method == PaymentMethod.GATEWAY.value
        gateway_order_id = f"order_{uuid4().hex[:14]}" if is_gateway else None

        order_ids = []
        for draft, seller in zip(drafts, totals.sellers):
            order_id = f"ord_{uuid4().hex[:12]}"
            self.orders[order_id] = {
                "shop_id": draft.seller_id,
                "subtotal": seller.subtotal,
                "discount": seller.discount,
                "payment_method": request.payment_method,
                "gateway_order_id": gateway_order_id,
                "status": "pending_payment" if is_gateway else "pending",
                "notes": request.notes,
            }
            order_ids.append(order_id)

        return CreateOrderResponse(
            orders=[CreatedOrderSchema(id=order_id) for order_id in order_ids],
            amount=to_minor_units(totals.grand_total),
            currency=self.config.currency,
            total=float(totals.grand_total),
            razorpay_order_id=gateway_order_id,
        )

    async def verify_payment(self, request: VerifyPaymentRequest) -> VerifyPaymentResponse:
        self.calls.append({"method": "verify_payment", "request": request.model_dump()})

        if self.network_down:
            raise NetworkFailure()
        if not request.order_ids:
            raise ServerRejection("No order IDs provided", status_code=400)

        orders = []
        for order_id in request.order_ids:
            order = self.orders.get(order_id)
            if order is None:
                raise ServerRejection("Order not found", status_code=404)
            orders.append(order)

        if not verify_signature(
            request.razorpay_order_id,
            request.razorpay_payment_id,
            request.razorpay_signature,
            self.config.gateway_secret,
        ):
            for order in orders:
                order["status"] = "payment_failed"
                order["payment_error"] = "Signature verification failed"
            raise ServerRejection("Payment verification failed", status_code=400)

        for order in orders:
            order["status"] = "paid"
            order["payment_id"] = request.razorpay_payment_id

        return VerifyPaymentResponse(success=True, order_ids=list(request.order_ids), payment_status="paid")
