"""Order total calculation.

A pure function of the seller drafts (with their coupons) and the pricing
configuration. Nothing is accumulated between calls; the session recomputes
totals from scratch after every coupon or selection change.

    subtotal   = Σ seller subtotals (pre-discount)
    discount   = Σ seller discounts, each clamped to its seller's subtotal
    shipping   = 0 if (subtotal - discount) >= threshold else flat fee
    tax        = rate% × (subtotal - discount), rounded half-up; shipping is never taxed
    grand      = subtotal - discount + shipping + tax
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal

from checkout.cart.partition import SellerOrderDraft, attach_coupons
from checkout.config import CheckoutConfig
from checkout.pricing.coupons import AppliedCoupon
from checkout.pricing.money import ZERO, round_minor, to_decimal


@dataclass(frozen=True)
class SellerTotals:
    seller_id: str
    seller_name: str
    subtotal: Decimal
    discount: Decimal
    coupon_code: str | None = None

    @property
    def net(self) -> Decimal:
        return self.subtotal - self.discount


@dataclass(frozen=True)
class OrderTotals:
    sellers: tuple[SellerTotals, ...]
    subtotal: Decimal
    discount: Decimal
    shipping: Decimal
    tax: Decimal
    grand_total: Decimal

    @property
    def is_free_shipping(self) -> bool:
        return self.shipping == ZERO

    @property
    def shipping_label(self) -> str:
        return "FREE" if self.is_free_shipping else str(self.shipping)

    def for_seller(self, seller_id: str) -> SellerTotals | None:
        return next((s for s in self.sellers if s.seller_id == seller_id), None)

    def to_dict(self) -> dict:
        return {
            "sellers": [
                {
                    "seller_id": s.seller_id,
                    "seller_name": s.seller_name,
                    "subtotal": str(s.subtotal),
                    "discount": str(s.discount),
                    "coupon_code": s.coupon_code,
                }
                for s in self.sellers
            ],
            "subtotal": str(self.subtotal),
            "discount": str(self.discount),
            "shipping": self.shipping_label,
            "tax": str(self.tax),
            "grand_total": str(self.grand_total),
        }


def _seller_totals(draft: SellerOrderDraft) -> SellerTotals:
    subtotal = round_minor(draft.subtotal)
    discount = ZERO
    if draft.coupon is not None:
        # Over-sized discounts are clamped; a seller's net never goes negative
        discount = min(max(draft.coupon.discount, ZERO), subtotal)
    return SellerTotals(
        seller_id=draft.seller_id,
        seller_name=draft.seller_name,
        subtotal=subtotal,
        discount=round_minor(discount),
        coupon_code=draft.coupon.code if draft.coupon is not None else None,
    )


def compute_totals(
    seller_drafts: Iterable[SellerOrderDraft],
    tax_rate_percent,
    free_shipping_threshold,
    flat_shipping_fee,
) -> OrderTotals:
    """Compute order totals for a set of seller drafts."""
    sellers = tuple(_seller_totals(draft) for draft in seller_drafts)

    subtotal = sum((s.subtotal for s in sellers), ZERO)
    discount = sum((s.discount for s in sellers), ZERO)
    taxable = subtotal - discount

    shipping = ZERO if taxable >= to_decimal(free_shipping_threshold) else round_minor(to_decimal(flat_shipping_fee))
    tax = round_minor(taxable * to_decimal(tax_rate_percent) / Decimal("100"))

    return OrderTotals(
        sellers=sellers,
        subtotal=subtotal,
        discount=discount,
        shipping=shipping,
        tax=tax,
        grand_total=subtotal - discount + shipping + tax,
    )


def totals_for(
    seller_drafts: Iterable[SellerOrderDraft],
    coupons: Mapping[str, AppliedCoupon],
    config: CheckoutConfig,
) -> OrderTotals:
    """Attach coupons to the drafts and compute totals with the configured pricing rules."""
    return compute_totals(
        attach_coupons(seller_drafts, dict(coupons)),
        tax_rate_percent=config.tax_rate_percent,
        free_shipping_threshold=config.free_shipping_threshold,
        flat_shipping_fee=config.flat_shipping_fee,
    )
