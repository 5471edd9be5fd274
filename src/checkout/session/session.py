"""Checkout session — owns the checkout state for one visit to checkout.

The session is the only holder of ``CheckoutState``. Each shopper action runs
a pure transition and, in the same step, recomputes order totals, so state and
totals are always swapped together.

``place_order`` is the one long-running action. It holds the processing flag
from the moment placement starts until a terminal outcome: confirmation for
COD, or gateway payment followed by server verification. Every failure clears
the flag, leaves the shopper on the review step and records a message they
can act on.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import structlog
from protean.exceptions import ValidationError

from checkout.cart.partition import SellerOrderDraft
from checkout.config import CheckoutConfig, get_config
from checkout.errors import CheckoutError, VerificationFailure, first_message
from checkout.gateway.adapter import PaymentGatewayAdapter
from checkout.placement.coordinator import OrderPlacementCoordinator
from checkout.placement.port import PlacedOrderResult
from checkout.placement.verification import PaymentVerifier
from checkout.pricing.coupons import AppliedCoupon, CouponPricing
from checkout.pricing.money import round_minor, to_decimal
from checkout.pricing.totals import OrderTotals, totals_for
from checkout.session import transitions
from checkout.session.state import CheckoutState, PaymentMethod
from checkout.shared.address import AddressProvider
from checkout.shared.navigation import confirmation_route
from checkout.shared.shopper import Shopper
from checkout.utils.logging import add_context, clear_context

logger = structlog.get_logger(__name__)

PLACEMENT_FAILED_MESSAGE = "Failed to place order. Please try again."
SHOP_NOT_FOUND_MESSAGE = "Shop not found"
COUPON_REQUIRED_MESSAGE = "Please enter a coupon code"


@dataclass(frozen=True)
class CheckoutOutcome:
    """Result of a ``place_order`` attempt."""

    route: str | None = None
    placed: PlacedOrderResult | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.route is not None


def _first_message(messages: dict) -> str:
    return first_message(messages) or PLACEMENT_FAILED_MESSAGE


class CheckoutSession:
    def __init__(
        self,
        shopper: Shopper,
        seller_drafts: Sequence[SellerOrderDraft],
        coordinator: OrderPlacementCoordinator,
        gateway: PaymentGatewayAdapter,
        verifier: PaymentVerifier,
        coupon_pricing: CouponPricing,
        address_provider: AddressProvider | None = None,
        config: CheckoutConfig | None = None,
        currency: str | None = None,
        state: CheckoutState | None = None,
    ) -> None:
        self.shopper = shopper
        self.seller_drafts = tuple(seller_drafts)
        self.coordinator = coordinator
        self.gateway = gateway
        self.verifier = verifier
        self.coupon_pricing = coupon_pricing
        self.address_provider = address_provider
        self.config = config or get_config()
        self.currency = currency or self.config.currency
        self.completed_route: str | None = None

        initial = state or CheckoutState()
        self.state = initial
        self.totals = self._compute(initial)

    # -------------------------------------------------------------------
    # State plumbing
    # -------------------------------------------------------------------
    def _compute(self, state: CheckoutState) -> OrderTotals:
        return totals_for(self.seller_drafts, state.coupons, self.config)

    def _commit(self, state: CheckoutState) -> CheckoutState:
        totals = self._compute(state)
        self.state, self.totals = state, totals
        return state

    def _draft(self, seller_id: str) -> SellerOrderDraft | None:
        return next((d for d in self.seller_drafts if d.seller_id == seller_id), None)

    # -------------------------------------------------------------------
    # Shopper actions
    # -------------------------------------------------------------------
    def select_shipping_address(self, address_id: str) -> CheckoutState:
        return self._commit(transitions.select_shipping_address(self.state, address_id))

    def select_billing_address(self, address_id: str) -> CheckoutState:
        return self._commit(transitions.select_billing_address(self.state, address_id))

    def set_billing_same_as_shipping(self, same: bool) -> CheckoutState:
        return self._commit(transitions.set_billing_same_as_shipping(self.state, same))

    def select_payment_method(self, method: PaymentMethod | str) -> CheckoutState:
        return self._commit(transitions.select_payment_method(self.state, PaymentMethod(method)))

    def set_notes(self, notes: str) -> CheckoutState:
        return self._commit(transitions.set_notes(self.state, notes))

    def advance(self) -> CheckoutState:
        return self._commit(transitions.advance(self.state))

    def go_back(self) -> CheckoutState:
        return self._commit(transitions.go_back(self.state))

    def clear_errors(self) -> CheckoutState:
        return self._commit(transitions.clear_errors(self.state))

    def apply_coupon(self, seller_id: str, code: str) -> CheckoutState:
        """Look up what ``code`` is worth for the seller and apply it."""
        transitions.ensure_idle(self.state, "change coupons")
        code = (code or "").strip()
        if not code:
            return self._commit(transitions.record_errors(self.state, {"coupon": COUPON_REQUIRED_MESSAGE}))

        draft = self._draft(seller_id)
        if draft is None:
            logger.warning("Coupon for unknown shop", component="CheckoutSession.apply_coupon", seller_id=seller_id)
            return self._commit(transitions.report_error(self.state, SHOP_NOT_FOUND_MESSAGE))

        try:
            discount = self.coupon_pricing.discount_for(code, draft)
            coupon = AppliedCoupon(code=code, discount_amount=float(discount))
        except (CheckoutError, ValidationError) as exc:
            message = exc.message if isinstance(exc, CheckoutError) else _first_message(exc.messages)
            logger.warning(
                "Coupon rejected",
                component="CheckoutSession.apply_coupon",
                seller_id=seller_id,
                code=code,
                error=message,
            )
            return self._commit(transitions.report_error(self.state, message))

        logger.info("Coupon applied", seller_id=seller_id, code=code, discount=str(coupon.discount))
        return self._commit(transitions.apply_coupon(self.state, seller_id, coupon))

    def remove_coupon(self, seller_id: str) -> CheckoutState:
        return self._commit(transitions.remove_coupon(self.state, seller_id))

    # -------------------------------------------------------------------
    # Review summary
    # -------------------------------------------------------------------
    def _address(self, address_id: str | None) -> dict | None:
        if not address_id or self.address_provider is None:
            return None
        address = self.address_provider.resolve(address_id)
        return address.to_dict() if address is not None else None

    def summary(self) -> dict:
        """Serializable snapshot of what the review step shows."""
        return {
            "step": self.state.step.value,
            "shipping_address": self._address(self.state.shipping_address_id),
            "billing_address": self._address(self.state.effective_billing_address_id),
            "payment_method": self.state.payment_method.value if self.state.payment_method else None,
            "sellers": [
                {
                    "seller_id": draft.seller_id,
                    "seller_name": draft.seller_name,
                    "items": [
                        {
                            "product_name": item.product_name,
                            "quantity": item.quantity,
                            "line_total": str(round_minor(to_decimal(item.line_total))),
                        }
                        for item in draft.items
                    ],
                    "coupon_code": seller.coupon_code,
                    "subtotal": str(seller.subtotal),
                    "discount": str(seller.discount),
                }
                for draft, seller in zip(self.seller_drafts, self.totals.sellers)
            ],
            "totals": self.totals.to_dict(),
            "currency": self.currency,
            "notes": self.state.notes,
        }

    # -------------------------------------------------------------------
    # Order placement
    # -------------------------------------------------------------------
    def _fail(self, message: str, placed: PlacedOrderResult | None = None) -> CheckoutOutcome:
        self._commit(transitions.fail_placement(self.state, message))
        return CheckoutOutcome(placed=placed, error=message)

    def _finish(self, placed: PlacedOrderResult) -> CheckoutOutcome:
        self._commit(transitions.complete_placement(self.state))
        route = confirmation_route(list(placed.order_ids))
        self.completed_route = route
        logger.info("Checkout completed", order_ids=list(placed.order_ids), route=route)
        return CheckoutOutcome(route=route, placed=placed)

    async def place_order(self) -> CheckoutOutcome:
        """Place the order and, for the gateway method, collect and verify payment.

        Raises ``ValidationError`` only for illegal use (already processing,
        not on the review step). Every operational failure is returned as a
        failed ``CheckoutOutcome`` with the message also set on the state.
        """
        self._commit(transitions.begin_placement(self.state))
        add_context(shopper_id=self.shopper.id)
        try:
            return await self._place_order()
        finally:
            clear_context()

    async def _place_order(self) -> CheckoutOutcome:
        placed: PlacedOrderResult | None = None
        try:
            placed = await self.coordinator.place_order(self.state, self.seller_drafts)
            if self.state.payment_method == PaymentMethod.COD:
                return self._finish(placed)

            result = await self.gateway.pay(placed, self.shopper)
            if not result.succeeded:
                return self._fail(result.message, placed)

            await self.verifier.verify(
                order_ids=placed.order_ids,
                gateway_order_id=result.payment.order_id,
                gateway_payment_id=result.payment.payment_id,
                gateway_signature=result.payment.signature,
            )
        except ValidationError as exc:
            message = _first_message(exc.messages)
            logger.warning("Order placement blocked", component="CheckoutSession.place_order", error=message)
            errors = {field: _first_message({field: messages}) for field, messages in exc.messages.items()}
            self._commit(transitions.record_errors(self.state, errors, message))
            return CheckoutOutcome(placed=placed, error=message)
        except VerificationFailure as exc:
            return self._fail(exc.message, placed)
        except CheckoutError as exc:
            logger.error(
                "Order placement failed",
                component="CheckoutSession.place_order",
                shipping_address_id=self.state.shipping_address_id,
                payment_method=self.state.payment_method.value,
                error=exc.message,
            )
            return self._fail(exc.message or PLACEMENT_FAILED_MESSAGE, placed)
        except Exception:
            # The processing lock is released on every exit.
            logger.exception(
                "Order placement crashed",
                component="CheckoutSession.place_order",
                payment_method=self.state.payment_method.value,
                order_ids=list(placed.order_ids) if placed else [],
            )
            return self._fail(PLACEMENT_FAILED_MESSAGE, placed)

        return self._finish(placed)
