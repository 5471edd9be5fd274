"""Checkout entry — decides whether a shopper may start checkout at all.

Anonymous shoppers are sent to login with a redirect back to checkout, and an
empty cart sends the shopper back to the cart. Otherwise the cart is read once,
split by seller, and handed to a fresh ``CheckoutSession``.
"""

from dataclasses import dataclass

import structlog

from checkout.cart.partition import partition
from checkout.cart.reader import CartReader
from checkout.config import CheckoutConfig, get_config
from checkout.gateway import get_widget_factory
from checkout.gateway.adapter import PaymentGatewayAdapter
from checkout.placement import get_order_api
from checkout.placement.coordinator import OrderPlacementCoordinator
from checkout.placement.port import OrderApi
from checkout.placement.verification import PaymentVerifier
from checkout.pricing.coupons import CouponPricing, PercentageCouponPricing
from checkout.session.session import CheckoutSession
from checkout.shared.address import AddressProvider
from checkout.shared.navigation import CART_ROUTE, login_route
from checkout.shared.shopper import Shopper

logger = structlog.get_logger(__name__)

_DEFAULT = object()


@dataclass(frozen=True)
class CheckoutEntry:
    """Either a ready session or the route the shopper must be sent to."""

    session: CheckoutSession | None = None
    redirect: str | None = None


async def enter_checkout(
    shopper: Shopper | None,
    cart_reader: CartReader,
    order_api: OrderApi | None = None,
    widget_factory=_DEFAULT,
    coupon_pricing: CouponPricing | None = None,
    address_provider: AddressProvider | None = None,
    config: CheckoutConfig | None = None,
) -> CheckoutEntry:
    if shopper is None:
        logger.info("Checkout requires login")
        return CheckoutEntry(redirect=login_route())

    snapshot = await cart_reader.read(shopper.id)
    if snapshot.is_empty:
        logger.info("Checkout entered with an empty cart", shopper_id=shopper.id)
        return CheckoutEntry(redirect=CART_ROUTE)

    config = config or get_config()
    order_api = order_api or get_order_api()
    if widget_factory is _DEFAULT:
        widget_factory = get_widget_factory()

    drafts = partition(snapshot.items)
    session = CheckoutSession(
        shopper=shopper,
        seller_drafts=drafts,
        coordinator=OrderPlacementCoordinator(order_api),
        gateway=PaymentGatewayAdapter(widget_factory, config),
        verifier=PaymentVerifier(order_api),
        coupon_pricing=coupon_pricing or PercentageCouponPricing(),
        address_provider=address_provider,
        config=config,
        currency=snapshot.currency,
    )
    logger.info(
        "Checkout started",
        shopper_id=shopper.id,
        sellers=len(drafts),
        items=len(snapshot.items),
        grand_total=str(session.totals.grand_total),
    )
    return CheckoutEntry(session=session)
