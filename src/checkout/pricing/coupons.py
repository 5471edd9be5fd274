"""Per-seller coupons and the pricing rule that values them."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING

from protean.fields import Float, String

from checkout.domain import checkout
from checkout.pricing.money import round_minor, to_decimal

if TYPE_CHECKING:
    from checkout.cart.partition import SellerOrderDraft


@checkout.value_object
class AppliedCoupon:
    """A coupon code applied to one seller's order, with the discount it is worth."""

    code = String(required=True, max_length=100)
    discount_amount = Float(required=True, min_value=0.0)

    @property
    def discount(self) -> Decimal:
        return to_decimal(self.discount_amount)


class CouponPricing(ABC):
    """External pricing rule lookup: what a code is worth for a seller draft."""

    @abstractmethod
    def discount_for(self, code: str, draft: "SellerOrderDraft") -> Decimal:
        """Return the discount amount, or raise ``CheckoutError`` if the code is not usable."""
        ...


class PercentageCouponPricing(CouponPricing):
    """Grants a flat percentage of the seller's subtotal for any code."""

    def __init__(self, percent: Decimal = Decimal("10")) -> None:
        self.percent = to_decimal(percent)

    def discount_for(self, code: str, draft: "SellerOrderDraft") -> Decimal:  # noqa: ARG002
        return round_minor(draft.subtotal * self.percent / Decimal("100"))
